"""Contract store backed by a single JSON document"""

import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from contract_assistant.db.base import JsonDocument
from contract_assistant.exceptions import NotFoundError, PersistenceError, ValidationError
from contract_assistant.models.contract import (
    IMMUTABLE_FIELDS,
    REQUIRED_FIELDS,
    Contract,
)
from contract_assistant.services.status import EXPIRING_WINDOW_DAYS, utc_today, with_status
from contract_assistant.utils.config import Settings, get_settings

logger = logging.getLogger(__name__)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _validate(data: dict) -> Contract:
    """Build a Contract, turning pydantic errors into our ValidationError"""
    try:
        return Contract.model_validate(data)
    except PydanticValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        raise ValidationError(f"Invalid contract fields: {', '.join(fields)}", fields=fields) from e


class ContractStore:
    """CRUD and search over the contract collection.

    Every operation reads the whole collection and every mutation writes it
    back whole. Returned contracts always carry a status derived from the
    clock at call time.
    """

    def __init__(
        self,
        path: Union[str, Path],
        clock: Callable[[], date] = utc_today,
        window_days: int = EXPIRING_WINDOW_DAYS,
    ):
        self.document = JsonDocument(path, default=list)
        self.clock = clock
        self.window_days = window_days

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ContractStore":
        settings = settings or get_settings()
        return cls(settings.contracts_file, window_days=settings.expiring_window_days)

    def init(self) -> bool:
        """Create the contracts file if absent"""
        return self.document.ensure_exists()

    def _load(self, records: list) -> list[Contract]:
        contracts = []
        for record in records:
            try:
                contracts.append(Contract.model_validate(record))
            except PydanticValidationError as e:
                raise PersistenceError(
                    f"Malformed contract record in {self.document.path.name}: {e}"
                ) from e
        return contracts

    def _fresh(self, contract: Contract, today: Optional[date] = None) -> Contract:
        return with_status(contract, today or self.clock(), self.window_days)

    def list_all(self) -> list[Contract]:
        """All contracts in insertion order"""
        today = self.clock()
        return [self._fresh(c, today) for c in self._load(self.document.read())]

    def get(self, contract_id: int) -> Contract:
        for contract in self._load(self.document.read()):
            if contract.id == contract_id:
                return self._fresh(contract)
        raise NotFoundError(f"Contract {contract_id} not found")

    def create(self, fields: Mapping[str, Any]) -> Contract:
        """Validate and append a new contract, assigning the next id"""
        missing = [name for name in REQUIRED_FIELDS if _is_blank(fields.get(name))]
        if missing:
            logger.info(f"Rejected contract, missing fields: {missing}")
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}", fields=missing
            )

        data = {
            key: value for key, value in fields.items()
            if value is not None and key not in IMMUTABLE_FIELDS
        }

        with self.document.transaction() as records:
            next_id = max((int(r.get("id", 0)) for r in records), default=0) + 1
            data["id"] = next_id
            data["created_at"] = datetime.now(timezone.utc)
            contract = _validate(data)
            records.append(contract.to_document())
            logger.info(f"Created contract {next_id}, store now holds {len(records)}")

        return self._fresh(contract)

    def update(self, contract_id: int, fields: Mapping[str, Any]) -> Contract:
        """Shallow-merge fields over an existing contract"""
        changes = {k: v for k, v in fields.items() if k not in IMMUTABLE_FIELDS}
        blanked = [name for name in REQUIRED_FIELDS if name in changes and _is_blank(changes[name])]
        if blanked:
            logger.info(f"Rejected update of contract {contract_id}, blank fields: {blanked}")
            raise ValidationError(
                f"Required fields cannot be blank: {', '.join(blanked)}", fields=blanked
            )

        with self.document.transaction() as records:
            for index, record in enumerate(records):
                if record.get("id") == contract_id:
                    break
            else:
                raise NotFoundError(f"Contract {contract_id} not found")

            contract = _validate({**record, **changes})
            records[index] = contract.to_document()
            logger.info(f"Updated contract {contract_id}: {sorted(changes)}")

        return self._fresh(contract)

    def delete(self, contract_id: int) -> bool:
        """Remove a contract. Unknown ids are a no-op; returns whether one was removed."""
        with self.document.lock:
            records = self.document.read()
            kept = [r for r in records if r.get("id") != contract_id]
            if len(kept) == len(records):
                logger.info(f"Delete of unknown contract {contract_id} ignored")
                return False
            self.document.write(kept)
        logger.info(f"Deleted contract {contract_id}")
        return True

    def search(self, term: str) -> list[Contract]:
        """Case-insensitive substring match on title, company, client name or status"""
        needle = term.lower()
        results = []
        for contract in self.list_all():
            haystack = (
                contract.title,
                contract.company,
                contract.client_name,
                contract.status.value,
            )
            if any(needle in value.lower() for value in haystack):
                results.append(contract)
        return results
