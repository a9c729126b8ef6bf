"""
Nexacro platform dataset XML: request builder and response decoder.

The KFA match detail service (SEARCH00.do) does not speak JSON. Requests are
a `Root` with a `Parameters` block (routing + session metadata) and one
`dsReqParam` dataset row; responses carry several named datasets whose rows
are flat `Col id=...` text cells.
"""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional, Union
from urllib.parse import quote

logger = logging.getLogger(__name__)

NEXACRO_NS = "http://www.nexacroplatform.com/platform/dataset"
SEARCH00_PATH = "/generate/MAP_04_001/SEARCH00.do"
RETURN_URL = "https://www.joinkfa.com"

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

Row = Dict[str, str]
Tables = Dict[str, List[Row]]

ET.register_namespace("", NEXACRO_NS)


def _q(tag: str) -> str:
    return f"{{{NEXACRO_NS}}}{tag}"


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def encode_state(secret: str) -> str:
    """Session secret in the url-encoded form the portal keeps in its `state` cookie."""
    return f"secret%3D{secret}%26returnUrl%3D{quote(RETURN_URL, safe='')}"


def build_match_detail_request(match_idx: str, single_idx: str, user_id: str, secret: str) -> str:
    root = ET.Element(_q("Root"))

    params = ET.SubElement(root, _q("Parameters"))
    for param_id, value in (
        ("state", encode_state(secret)),
        ("GP_EMPL_ID", user_id),
        ("GP_SYS_CD", "USER"),
        ("GP_MENU_ID", "WorkFrame"),
        ("GP_SVC_PATH", SEARCH00_PATH),
        ("GP_SERVICE_ID", "SEARCH00"),
        ("GP_AUTH_GROUP", "GE"),
        ("GP_LOG_YN", ""),
    ):
        param = ET.SubElement(params, _q("Parameter"), {"id": param_id})
        param.text = value

    values = (
        ("v_MATCH_IDX", match_idx),
        ("v_SINGLE_IDX", single_idx),
        ("v_USER_ID", user_id),
    )
    dataset = ET.SubElement(root, _q("Dataset"), {"id": "dsReqParam"})
    column_info = ET.SubElement(dataset, _q("ColumnInfo"))
    for column_id, _ in values:
        ET.SubElement(column_info, _q("Column"), {"id": column_id, "type": "STRING", "size": "256"})
    row = ET.SubElement(ET.SubElement(dataset, _q("Rows")), _q("Row"))
    for column_id, value in values:
        col = ET.SubElement(row, _q("Col"), {"id": column_id})
        col.text = value

    return XML_DECLARATION + ET.tostring(root, encoding="unicode")


def _find_parameter(root: ET.Element, param_id: str) -> Optional[str]:
    for element in root.iter():
        if _local(element.tag) == "Parameter" and element.get("id") == param_id:
            return (element.text or "").strip()
    return None


def parse_response(xml: Union[str, bytes]) -> Tables:
    """
    Decode every Dataset into a list of string-keyed rows.

    An ErrorCode parameter other than "0" (even empty) is logged and decoded as {}.
    Raises xml.etree.ElementTree.ParseError on malformed input.
    """
    root = ET.fromstring(xml)

    error_code = _find_parameter(root, "ErrorCode")
    if error_code is not None and error_code != "0":
        error_msg = _find_parameter(root, "ErrorMsg") or ""
        logger.error("[NEXACRO ERROR] Code=%s, Msg=%s", error_code, error_msg)
        return {}

    tables: Tables = {}
    for dataset in root:
        if _local(dataset.tag) != "Dataset":
            continue
        rows: List[Row] = []
        for rows_el in dataset:
            if _local(rows_el.tag) != "Rows":
                continue
            for row_el in rows_el:
                if _local(row_el.tag) != "Row":
                    continue
                rows.append(
                    {
                        col.get("id", ""): col.text or ""
                        for col in row_el
                        if _local(col.tag) == "Col"
                    }
                )
        tables[dataset.get("id", "")] = rows
    return tables


def first_row(tables: Tables, dataset_id: str) -> Optional[Row]:
    rows = tables.get(dataset_id) or []
    return rows[0] if rows else None


def rows(tables: Tables, dataset_id: str) -> List[Row]:
    return tables.get(dataset_id) or []


def get(row: Row, key: str) -> str:
    return row.get(key, "") or ""
