"""CSV loader — reads and normalizes seed data files."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from leadflow.adapters.csv_loader.normalizer import (
    clean_string,
    normalize_column_name,
    parse_bool,
    parse_codes,
)

logger = logging.getLogger(__name__)


def _sniff_dialect(sample: str) -> type[csv.Dialect]:
    """Detect the delimiter (comma/semicolon/tab) from the header line."""
    if not sample:
        return csv.excel

    first_line = sample.splitlines()[0]
    delims = [";", ",", "\t"]
    counts = {d: first_line.count(d) for d in delims}
    best_delim = max(counts, key=counts.get)

    if counts[best_delim] > 0:
        class DynamicDialect(csv.excel):
            delimiter = best_delim
        return DynamicDialect
    return csv.excel


def _read_csv(file_path: Path, encoding: str = "utf-8-sig") -> list[dict[str, str | None]]:
    """Read a CSV file with BOM handling and column normalization."""
    with open(file_path, encoding=encoding, newline="") as f:
        sample = f.read(4096)
        f.seek(0)
        reader = csv.DictReader(f, dialect=_sniff_dialect(sample))
        if reader.fieldnames is None:
            raise ValueError(f"CSV file {file_path} has no header row")

        col_map = {col: normalize_column_name(col) for col in reader.fieldnames}
        rows = []
        for raw_row in reader:
            row = {col_map[k]: clean_string(v) for k, v in raw_row.items() if k is not None}
            rows.append(row)

    logger.info("Loaded %d rows from %s (columns: %s)", len(rows), file_path.name, list(col_map.values()))
    return rows


def _first(row: dict, *keys: str) -> str | None:
    for key in keys:
        value = row.get(key)
        if value:
            return value
    return None


def _parse_int(raw: str | None, default: int | None = None) -> int | None:
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        logger.warning("Could not parse integer: %s", raw)
        return default


def load_product_groups(file_path: Path) -> list[dict]:
    """Columns: code / mã, name / tên, is_active."""
    groups = []
    for row in _read_csv(file_path):
        code = _first(row, "code", "mã", "ma")
        if not code:
            logger.warning("Product group row without code skipped: %s", row)
            continue
        groups.append({
            "code": code.upper(),
            "name": _first(row, "name", "tên", "ten") or code,
            "is_active": parse_bool(row.get("is_active")),
        })
    logger.info("Parsed %d product groups", len(groups))
    return groups


def load_employees(file_path: Path) -> list[dict]:
    """Columns: employee_code, full_name, email, phone, is_active,
    round_robin_order, specializations (product group codes)."""
    employees = []
    for row in _read_csv(file_path):
        code = _first(row, "employee_code", "mã_nv", "code")
        name = _first(row, "full_name", "họ_tên", "name")
        if not code or not name:
            logger.warning("Employee row without code or name skipped: %s", row)
            continue
        employees.append({
            "employee_code": code,
            "full_name": name,
            "email": row.get("email"),
            "phone": _first(row, "phone", "sđt", "điện_thoại"),
            "is_active": parse_bool(row.get("is_active")),
            "round_robin_order": _parse_int(row.get("round_robin_order"), 0),
            "specializations": parse_codes(_first(row, "specializations", "chuyên_môn")),
        })
    logger.info("Parsed %d employees", len(employees))
    return employees


def load_rules(file_path: Path) -> list[dict]:
    """Columns: rule_code, customer_group, product_groups (codes), sales (employee codes)."""
    rules = []
    for row in _read_csv(file_path):
        code = _first(row, "rule_code", "code")
        if not code:
            continue
        rules.append({
            "rule_code": code,
            "customer_group": _first(row, "customer_group", "nhóm_kh"),
            "product_group_codes": parse_codes(_first(row, "product_groups", "nhóm_sp")),
            "employee_codes": parse_codes(_first(row, "sales", "assigned_sales")),
            "is_active": parse_bool(row.get("is_active")),
        })
    logger.info("Parsed %d allocation rules", len(rules))
    return rules


def load_leads(file_path: Path) -> list[dict]:
    """Columns: full_name, phone, email, customer_group, product_group (code)."""
    leads = []
    for row in _read_csv(file_path):
        name = _first(row, "full_name", "họ_tên", "name")
        if not name:
            continue
        product = _first(row, "product_group", "nhóm_sp")
        leads.append({
            "full_name": name,
            "phone": _first(row, "phone", "sđt", "điện_thoại"),
            "email": row.get("email"),
            "customer_group": _first(row, "customer_group", "nhóm_kh"),
            "product_group_code": product.upper() if product else None,
        })
    logger.info("Parsed %d leads", len(leads))
    return leads
