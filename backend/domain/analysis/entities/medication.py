"""Medication entities sent along with an analysis request."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

InteractionSeverity = Literal["low", "medium", "high"]


@dataclass
class Medication:
    """
    Medication the user takes, forwarded to the analysis endpoint so that
    the model can emit interaction warnings.
    """

    id: str
    name: str
    dosage: str
    frequency: str
    time_of_day: List[str] = field(default_factory=list)
    notes: Optional[str] = None

    def to_request_payload(self) -> Dict[str, Any]:
        # The endpoint rejects null notes
        return {
            "id": self.id,
            "name": self.name,
            "dosage": self.dosage,
            "frequency": self.frequency,
            "timeOfDay": list(self.time_of_day),
            "notes": self.notes or "",
        }


@dataclass(frozen=True)
class MedicationInteraction:
    medication_name: str
    warning: str
    severity: InteractionSeverity = "low"
