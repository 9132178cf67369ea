"""
Export builders for parser and import tests.

The sample_* fixtures express the same company data in all three formats:

    Groups:      Current Assets; Sundry Debtors, Cash-in-Hand (under Current
                 Assets); Sales Accounts; Finished Goods
    Ledgers:     Acme Traders (Sundry Debtors, Dr 1500, GSTIN, Karnataka),
                 Cash (Cash-in-Hand)
    Stock items: Widget (Finished Goods, PCS, HSN 8471, 18%, 10 @ 5000)
    Vouchers:    Sales S-001 on 2024-04-01 to Acme Traders for 1180
"""

import csv
import io
from datetime import datetime

import openpyxl
import pytest

SAMPLE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<ENVELOPE>
 <HEADER><TALLYREQUEST>Import Data</TALLYREQUEST></HEADER>
 <BODY>
  <IMPORTDATA>
   <REQUESTDESC><REPORTNAME>All Masters</REPORTNAME></REQUESTDESC>
   <REQUESTDATA>
    <TALLYMESSAGE xmlns:UDF="TallyUDF">
     <GROUP NAME="Current Assets" ACTION="Create">
      <PARENT/>
     </GROUP>
     <GROUP NAME="Sundry Debtors" ACTION="Create">
      <PARENT>Current Assets</PARENT>
     </GROUP>
     <GROUP ACTION="Create">
      <NAME.LIST><NAME>Cash-in-Hand</NAME></NAME.LIST>
      <PARENT>Current Assets</PARENT>
     </GROUP>
    </TALLYMESSAGE>
    <TALLYMESSAGE xmlns:UDF="TallyUDF">
     <GROUP NAME="Sales Accounts"/>
     <GROUP><NAME>Finished Goods</NAME></GROUP>
     <LEDGER NAME="Acme Traders" ACTION="Create">
      <PARENT>Sundry Debtors</PARENT>
      <OPENINGBALANCE>Dr 1500</OPENINGBALANCE>
      <PARTYGSTIN>29ABCDE1234F1Z5</PARTYGSTIN>
      <LEDSTATENAME>Karnataka</LEDSTATENAME>
     </LEDGER>
     <LEDGER NAME="Cash">
      <PARENT>Cash-in-Hand</PARENT>
     </LEDGER>
     <STOCKITEM NAME="Widget">
      <PARENT>Finished Goods</PARENT>
      <BASEUNITS>PCS</BASEUNITS>
      <HSNCODE>8471</HSNCODE>
      <GSTRATE>18</GSTRATE>
      <OPENINGBALANCE>10 PCS</OPENINGBALANCE>
      <OPENINGVALUE>5000</OPENINGVALUE>
     </STOCKITEM>
    </TALLYMESSAGE>
    <TALLYMESSAGE>
     <VOUCHER VCHTYPE="Sales" ACTION="Create">
      <DATE>20240401</DATE>
      <VOUCHERTYPENAME>Sales</VOUCHERTYPENAME>
      <VOUCHERNUMBER>S-001</VOUCHERNUMBER>
      <PARTYLEDGERNAME>Acme Traders</PARTYLEDGERNAME>
      <NARRATION>Goods sold</NARRATION>
      <AMOUNT>1180</AMOUNT>
     </VOUCHER>
    </TALLYMESSAGE>
   </REQUESTDATA>
  </IMPORTDATA>
 </BODY>
</ENVELOPE>
"""

CSV_HEADER = [
    "Type",
    "Name",
    "Parent",
    "Group",
    "Opening Balance",
    "GSTIN",
    "State",
    "Unit",
    "HSN Code",
    "GST Rate",
    "Opening Stock",
    "Opening Value",
    "Voucher Type",
    "Number",
    "Date",
    "Party",
    "Narration",
    "Amount",
]

SAMPLE_CSV_ROWS = [
    {"Type": "Group", "Name": "Current Assets"},
    {"Type": "Group", "Name": "Sundry Debtors", "Parent": "Current Assets"},
    {"Type": "Group", "Name": "Cash-in-Hand", "Parent": "Current Assets"},
    {"Type": "Group", "Name": "Sales Accounts"},
    {"Type": "Group", "Name": "Finished Goods"},
    {
        "Type": "Ledger",
        "Name": "Acme Traders",
        "Group": "Sundry Debtors",
        "Opening Balance": "Dr 1,500",
        "GSTIN": "29ABCDE1234F1Z5",
        "State": "Karnataka",
    },
    {"Type": "Ledger", "Name": "Cash", "Group": "Cash-in-Hand"},
    {
        "Type": "Stock Item",
        "Name": "Widget",
        "Group": "Finished Goods",
        "Unit": "PCS",
        "HSN Code": "8471",
        "GST Rate": "18%",
        "Opening Stock": "10",
        "Opening Value": "5000",
    },
    {
        "Type": "Voucher",
        "Voucher Type": "Sales",
        "Number": "S-001",
        "Date": "01-04-2024",
        "Party": "Acme Traders",
        "Narration": "Goods sold",
        "Amount": "1180",
    },
]

SAMPLE_SHEETS = {
    "Groups": [
        ["Name", "Parent"],
        ["Current Assets", None],
        ["Sundry Debtors", "Current Assets"],
        ["Cash-in-Hand", "Current Assets"],
        ["Sales Accounts", None],
        ["Finished Goods", None],
    ],
    "Ledgers": [
        ["Name", "Group", "OPENING_BALANCE", "GSTIN", "State"],
        ["Acme Traders", "Sundry Debtors", 1500, "29ABCDE1234F1Z5", "Karnataka"],
        ["Cash", "Cash-in-Hand", None, None, None],
    ],
    "Stock Items": [
        ["Name", "Group", "Unit", "HSN Code", "GST Rate", "Opening Stock", "Opening Value"],
        ["Widget", "Finished Goods", "PCS", "8471", 18, 10, 5000],
    ],
    "Vouchers": [
        ["Voucher Type", "Number", "Date", "Party", "Narration", "Amount"],
        ["Sales", "S-001", datetime(2024, 4, 1), "Acme Traders", "Goods sold", 1180],
    ],
}


def build_xlsx(sheets: dict[str, list[list]]) -> bytes:
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(name)
        for row in rows:
            ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def build_csv(rows: list[dict], header: list[str] | None = None, encoding: str = "utf-8") -> bytes:
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=header or CSV_HEADER, restval="")
    writer.writeheader()
    writer.writerows(rows)
    return buf.getvalue().encode(encoding)


@pytest.fixture
def make_xlsx():
    return build_xlsx


@pytest.fixture
def make_csv():
    return build_csv


@pytest.fixture
def sample_xml_bytes() -> bytes:
    return SAMPLE_XML.encode("utf-8")


@pytest.fixture
def sample_csv_bytes() -> bytes:
    return build_csv(SAMPLE_CSV_ROWS)


@pytest.fixture
def sample_xlsx_bytes() -> bytes:
    return build_xlsx(SAMPLE_SHEETS)
