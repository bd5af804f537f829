"""Cell info parsing.

A cell scan payload is a mapping::

    {
        "network_operator": "26201",
        "cells": [
            {"type": "lte", "registered": True, "mcc": 262, "mnc": 1,
             "tac": 4711, "ci": 123456, "pci": 42, "dbm": -97},
            {"type": "cdma", "system_id": 4, "network_id": 9,
             "basestation_id": 77, "dbm": -80},
        ],
    }

Neighboring-cell reports use ``network_type`` names as reported by the
modem and inherit MCC/MNC from the network operator.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from pynlp.ingestion.normalize import parse_batch, require_int, safe_int, safe_str
from pynlp.models.observation import Cell, CellType

_logger = logging.getLogger(__name__)

# Value the platform reports for an unknown MCC (Integer.MAX_VALUE).
UNKNOWN_MCC = 2_147_483_647

_CELL_TYPE_ALIASES: dict[str, CellType] = {
    "gsm": CellType.GSM,
    "umts": CellType.UMTS,
    "wcdma": CellType.UMTS,
    "lte": CellType.LTE,
    "cdma": CellType.CDMA,
}

_NETWORK_TYPES: dict[str, CellType] = {
    "gprs": CellType.GSM,
    "edge": CellType.GSM,
    "umts": CellType.UMTS,
    "hsdpa": CellType.UMTS,
    "hsupa": CellType.UMTS,
    "hspa": CellType.UMTS,
    "hspap": CellType.UMTS,
    "lte": CellType.LTE,
    "evdo_0": CellType.CDMA,
    "evdo_a": CellType.CDMA,
    "evdo_b": CellType.CDMA,
    "1xrtt": CellType.CDMA,
    "ehrpd": CellType.CDMA,
    "iden": CellType.CDMA,
}


def cell_type_for_network(network_type: str | None) -> CellType | None:
    """Map a radio network type name (``"edge"``, ``"hspa"``...) to a cell type."""
    if not network_type:
        return None
    return _NETWORK_TYPES.get(network_type.strip().lower())


def split_network_operator(network_operator: str | None) -> tuple[int | None, int | None]:
    """Split an operator string such as ``"26201"`` into ``(262, 1)``."""
    if not network_operator or len(network_operator) < 4 or not network_operator.isdigit():
        return None, None
    return int(network_operator[:3]), int(network_operator[3:])


def _cell_type(entry: Mapping[str, Any]) -> CellType:
    raw_type = safe_str(entry.get("type"))
    cell_type = _CELL_TYPE_ALIASES.get(raw_type.lower()) if raw_type else None
    if cell_type is None:
        raise ValueError(f"unknown cell type {raw_type!r}")
    return cell_type


def fix_reported_mnc(
    entries: Sequence[Any],
    network_operator: str | None,
) -> list[Any]:
    """Repair MNCs that some modems report as ``real_mnc * 10 + 15``.

    The fault is detected structurally: a registered GSM/UMTS/LTE entry
    whose MNC equals ``real_mnc * 10 + 15`` for the operator's MNC.  When
    present, every GSM/UMTS/LTE MNC in ``[25, 1005]`` is rewritten to
    ``(mnc - 15) // 10``.  Payloads containing CDMA cells are left alone.

    Returns new entry dicts; *entries* is not modified.  Entries that are
    not mappings are passed through untouched for the parser to drop.
    """
    fixed = [dict(entry) if isinstance(entry, Mapping) else entry for entry in entries]
    if network_operator is None or len(network_operator) != 5 or not network_operator.isdigit():
        return fixed
    real_mnc = int(network_operator[3:])

    types: list[CellType | None] = []
    for entry in fixed:
        raw_type = safe_str(entry.get("type")) if isinstance(entry, Mapping) else None
        types.append(_CELL_TYPE_ALIASES.get(raw_type.lower()) if raw_type else None)
    if CellType.CDMA in types:
        return fixed

    affected = False
    for entry, cell_type in zip(fixed, types, strict=True):
        if cell_type is None or not entry.get("registered"):
            continue
        if safe_int(entry.get("mnc")) == real_mnc * 10 + 15:
            affected = True
            break
    if not affected:
        return fixed

    _logger.debug("Repairing cell MNCs reported as mnc*10+15 for operator %s", network_operator)
    for entry, cell_type in zip(fixed, types, strict=True):
        if cell_type is None:
            continue
        mnc = safe_int(entry.get("mnc"))
        if mnc is not None and 25 <= mnc <= 1005:
            entry["mnc"] = (mnc - 15) // 10
    return fixed


def parse_cell_entry(entry: Mapping[str, Any], *, operator_mcc: int | None = None) -> Cell | None:
    cell_type = _cell_type(entry)
    signal = require_int(entry, "dbm", "signal", "rssi")
    if cell_type == CellType.CDMA:
        if operator_mcc is None:
            raise ValueError("CDMA cell without network operator MCC")
        return Cell(
            type=cell_type,
            mcc=operator_mcc,
            mnc=require_int(entry, "system_id", "mnc"),
            lac=require_int(entry, "network_id", "lac"),
            cid=require_int(entry, "basestation_id", "cid"),
            signal=signal,
        )

    mcc = require_int(entry, "mcc")
    if mcc == UNKNOWN_MCC:
        return None
    psc = safe_int(entry.get("psc") if entry.get("psc") is not None else entry.get("pci"))
    return Cell(
        type=cell_type,
        mcc=mcc,
        mnc=require_int(entry, "mnc"),
        lac=require_int(entry, "lac", "tac"),
        cid=require_int(entry, "cid", "ci"),
        psc=-1 if psc is None else psc,
        signal=signal,
    )


def parse_cell_scan(
    payload: Mapping[str, Any] | None,
    *,
    fix_mnc: bool = True,
    redact: bool = True,
) -> set[Cell]:
    """Parse a cell info payload into :class:`Cell` observations."""
    if not payload:
        return set()
    network_operator = safe_str(payload.get("network_operator"))
    operator_mcc, _ = split_network_operator(network_operator)
    entries: list[Any] = list(payload.get("cells") or [])
    if fix_mnc:
        entries = fix_reported_mnc(entries, network_operator)
    return parse_batch(
        entries,
        lambda entry: parse_cell_entry(entry, operator_mcc=operator_mcc),
        label="cell",
        redact=redact,
    )


def parse_neighboring_entry(
    entry: Mapping[str, Any],
    *,
    operator_mcc: int | None,
    operator_mnc: int | None,
) -> Cell | None:
    if cell_type_for_network(safe_str(entry.get("network_type"))) != CellType.GSM:
        return None
    if operator_mcc is None or operator_mnc is None:
        raise ValueError("neighboring cell without network operator")
    psc = safe_int(entry.get("psc"))
    return Cell(
        type=CellType.GSM,
        mcc=operator_mcc,
        mnc=operator_mnc,
        lac=require_int(entry, "lac"),
        cid=require_int(entry, "cid"),
        psc=-1 if psc is None else psc,
        signal=require_int(entry, "rssi", "signal"),
    )


def parse_neighboring_cells(
    entries: Iterable[Mapping[str, Any]] | None,
    network_operator: str | None,
    *,
    redact: bool = True,
) -> set[Cell]:
    """Parse neighboring-cell reports.  Only GSM neighbors are kept."""
    operator_mcc, operator_mnc = split_network_operator(network_operator)
    return parse_batch(
        entries,
        lambda entry: parse_neighboring_entry(entry, operator_mcc=operator_mcc, operator_mnc=operator_mnc),
        label="neighboring cell",
        redact=redact,
    )
