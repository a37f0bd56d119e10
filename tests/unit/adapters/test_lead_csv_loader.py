"""Tests for CSV loader functions."""

import csv
import tempfile
from pathlib import Path

from leadflow.adapters.csv_loader.loader import (
    load_employees,
    load_leads,
    load_product_groups,
    load_rules,
)


def _write_csv(rows: list[dict], path: Path, delimiter: str = ",") -> None:
    with open(path, "w", encoding="utf-8-sig", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=rows[0].keys(), delimiter=delimiter)
        writer.writeheader()
        writer.writerows(rows)


def test_load_product_groups():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "product_groups.csv"
        _write_csv([
            {"Code": "pg01", "Name": "Máy lọc nước", "is_active": ""},
            {"Code": "", "Name": "Không mã", "is_active": "1"},
            {"Code": "PG02", "Name": "", "is_active": "0"},
        ], path)

        groups = load_product_groups(path)
        assert groups == [
            {"code": "PG01", "name": "Máy lọc nước", "is_active": True},
            {"code": "PG02", "name": "PG02", "is_active": False},
        ]


def test_load_employees_semicolon_delimited():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "sales_employees.csv"
        _write_csv([
            {"Employee Code": "S01", "Full Name": "Nguyễn An", "Email": "an@example.com",
             "Phone": "0901", "Round Robin Order": "2", "Specializations": "PG01, pg02"},
            {"Employee Code": "S02", "Full Name": "Trần Bình", "Email": "",
             "Phone": "", "Round Robin Order": "abc", "Specializations": ""},
        ], path, delimiter=";")

        employees = load_employees(path)
        assert len(employees) == 2
        assert employees[0]["employee_code"] == "S01"
        assert employees[0]["round_robin_order"] == 2
        assert employees[0]["specializations"] == ["PG01", "PG02"]
        assert employees[0]["is_active"] is True
        assert employees[1]["email"] is None
        assert employees[1]["round_robin_order"] == 0
        assert employees[1]["specializations"] == []


def test_load_employees_skips_rows_without_code():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "employees.csv"
        _write_csv([
            {"employee_code": "", "full_name": "No Code"},
            {"employee_code": "S09", "full_name": "Has Code"},
        ], path)
        assert [e["employee_code"] for e in load_employees(path)] == ["S09"]


def test_load_rules():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "allocation_rules.csv"
        _write_csv([
            {"rule_code": "R1", "customer_group": "Doanh nghiệp",
             "product_groups": "PG01;PG02", "sales": "s01 s02", "is_active": "true"},
            {"rule_code": "R2", "customer_group": "", "product_groups": "",
             "sales": "S03", "is_active": "no"},
        ], path)

        rules = load_rules(path)
        assert rules[0]["customer_group"] == "Doanh nghiệp"
        assert rules[0]["product_group_codes"] == ["PG01", "PG02"]
        assert rules[0]["employee_codes"] == ["S01", "S02"]
        assert rules[1]["customer_group"] is None
        assert rules[1]["product_group_codes"] == []
        assert rules[1]["is_active"] is False


def test_load_leads():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "leads.csv"
        _write_csv([
            {"full_name": "Lê Cường", "phone": "0912", "email": "",
             "customer_group": "Cá nhân", "product_group": "pg01"},
            {"full_name": "", "phone": "0913", "email": "", "customer_group": "",
             "product_group": ""},
        ], path)

        leads = load_leads(path)
        assert len(leads) == 1
        assert leads[0]["product_group_code"] == "PG01"
        assert leads[0]["customer_group"] == "Cá nhân"
        assert leads[0]["email"] is None
