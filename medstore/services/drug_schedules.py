from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from medstore.models.inventory import DrugSchedule


# ------------------------------------------------------------
# India: Drugs & Cosmetics Act classes tracked by the store.
# H / H1 / narcotic need a prescription at the counter;
# H1 / narcotic / tb also need a register entry.
# ------------------------------------------------------------
SCHEDULE_META: Dict[DrugSchedule, Dict[str, Any]] = {
    DrugSchedule.NONE: {"label": "OTC", "desc": "No schedule restrictions."},
    DrugSchedule.H: {"label": "Schedule H", "desc": "Prescription drug (Rx only).", "requires_prescription": True},
    DrugSchedule.H1: {"label": "Schedule H1", "desc": "High-surveillance Rx; register tracking required.", "requires_prescription": True, "requires_register": True},
    DrugSchedule.NARCOTIC: {"label": "Narcotic (Schedule X)", "desc": "Narcotic/psychotropic; strict storage/sale/records.", "requires_prescription": True, "requires_register": True},
    DrugSchedule.TB: {"label": "TB drug", "desc": "Anti-tubercular; sale reported to the TB programme.", "requires_register": True},
}

# Common spellings seen on supplier invoices and bulk sheets
_ALIASES: Dict[str, DrugSchedule] = {
    "": DrugSchedule.NONE,
    "NONE": DrugSchedule.NONE,
    "OTC": DrugSchedule.NONE,
    "H": DrugSchedule.H,
    "H1": DrugSchedule.H1,
    "X": DrugSchedule.NARCOTIC,
    "NARCOTIC": DrugSchedule.NARCOTIC,
    "NDPS": DrugSchedule.NARCOTIC,
    "TB": DrugSchedule.TB,
}


def normalize_schedule(code: Optional[str]) -> DrugSchedule:
    """
    "h-1" -> H1, "Schedule X" -> narcotic, None -> none.
    Raises ValueError for unknown codes.
    """
    if isinstance(code, DrugSchedule):
        return code
    c = (code or "").strip().upper()
    c = c.replace("SCHEDULE", "").replace("-", "").replace(" ", "")
    try:
        return _ALIASES[c]
    except KeyError:
        raise ValueError(f"Unknown schedule '{code}'")


def normalize_schedules(codes: Sequence[str]) -> List[DrugSchedule]:
    out: List[DrugSchedule] = []
    for raw in codes:
        # "H,H1" arrives as one value from some clients
        for part in str(raw).split(","):
            if part.strip():
                s = normalize_schedule(part)
                if s not in out:
                    out.append(s)
    return out


def get_schedule_meta(code: Optional[str]) -> Dict[str, Any]:
    sched = normalize_schedule(code)
    base = SCHEDULE_META.get(sched, {})
    return {
        "code": sched.value,
        "label": base.get("label", sched.value),
        "desc": base.get("desc", ""),
        "requires_prescription": bool(base.get("requires_prescription", False)),
        "requires_register": bool(base.get("requires_register", False)),
    }
