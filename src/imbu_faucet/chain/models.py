"""Typed views of the on-chain project records.

Storage values arrive from the node as loosely typed nested dicts. They are
decoded once here so the rest of the service works with frozen dataclasses.
"""

from dataclasses import dataclass
from typing import Any


def _get(record: dict, *names: str, default: Any = None) -> Any:
    """Return the first present field among snake_case/camelCase spellings."""
    for name in names:
        if name in record:
            return record[name]
    return default


def _decode_text(value: Any) -> str:
    """Decode a bounded byte string field into text."""
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, str) and value.startswith("0x"):
        try:
            return bytes.fromhex(value[2:]).decode("utf-8")
        except ValueError:
            return value
    return str(value)


def _decode_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def _decode_int(value: Any, default: int = 0) -> int:
    if value is None:
        return default
    if isinstance(value, str):
        value = value.replace(",", "").strip()
    return int(value)


@dataclass(frozen=True)
class ChainInfo:
    """Identity of the connected node, for diagnostics."""

    chain: str
    node_name: str
    node_version: str


@dataclass(frozen=True)
class Milestone:
    """A milestone of a project's funding plan."""

    project_key: int
    name: str
    is_approved: bool
    percentage_to_unlock: int
    milestone_key: int = 0

    @classmethod
    def from_chain(cls, record: dict) -> "Milestone":
        return cls(
            project_key=_decode_int(_get(record, "project_key", "projectKey")),
            milestone_key=_decode_int(_get(record, "milestone_key", "milestoneKey")),
            name=_decode_text(_get(record, "name")),
            is_approved=_decode_bool(_get(record, "is_approved", "isApproved", default=False)),
            percentage_to_unlock=_decode_int(
                _get(record, "percentage_to_unlock", "percentageToUnlock")
            ),
        )


@dataclass(frozen=True)
class Project:
    """A funding-request project as stored on chain.

    Attributes
    ----------
    key : int
        Storage map key of the project.
    name : str
        Display name.
    initiator : str
        SS58 address of the account that created the project.
    milestones : tuple[Milestone, ...]
        Ordered milestones. Only the first one is addressable by this service.
    contributions : tuple
        Committed contributions; empty until someone funds the project.
    approved_for_funding : bool | None
        Funding approval flag when the runtime exposes it.
    """

    key: int
    name: str
    initiator: str
    milestones: tuple[Milestone, ...] = ()
    contributions: tuple = ()
    approved_for_funding: bool | None = None

    @property
    def first_milestone(self) -> Milestone | None:
        return self.milestones[0] if self.milestones else None

    @property
    def project_key(self) -> int:
        """Key used in project extrinsics, taken from the first milestone."""
        if self.first_milestone is not None:
            return self.first_milestone.project_key
        return self.key

    @property
    def has_contributions(self) -> bool:
        return len(self.contributions) > 0

    @property
    def display_name(self) -> str:
        return self.name.upper()

    @classmethod
    def from_chain(cls, key: Any, record: dict) -> "Project":
        """Decode a ``ImbueProposals.Projects`` storage entry.

        Parameters
        ----------
        key : Any
            Decoded storage key (project id).
        record : dict
            Decoded storage value.

        Returns
        -------
        Project
            The typed project.
        """
        approved = _get(record, "approved_for_funding", "approvedForFunding")
        contributions = _get(record, "contributions", default=()) or ()
        if isinstance(contributions, dict):
            contributions = tuple(contributions.items())
        return cls(
            key=_decode_int(key),
            name=_decode_text(_get(record, "name")),
            initiator=str(_get(record, "initiator", default="")),
            milestones=tuple(
                Milestone.from_chain(m) for m in (_get(record, "milestones", default=()) or ())
            ),
            contributions=tuple(contributions),
            approved_for_funding=None if approved is None else _decode_bool(approved),
        )
