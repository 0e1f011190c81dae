"""Occurrence classification tables.

Each entry flow offers its own list of occurrence labels. A label maps to
the signed effect it has on the hour bank, and some labels mark a
zero-impact regularization of a missing punch. Labels outside a table are
rejected rather than given a default effect.
"""

from __future__ import annotations

from dataclasses import dataclass

from hour_bank.ledger.types import EntryFlow, RecordType


@dataclass(frozen=True)
class OccurrenceOption:
    """A selectable occurrence label."""

    label: str
    type: RecordType
    regularization: bool = False


class UnknownOccurrenceError(Exception):
    """Raised when a label is not part of the classification table."""

    def __init__(self, label: str, flow: EntryFlow | None = None):
        self.label = label
        self.flow = flow
        msg = f"Unknown occurrence type '{label}'"
        if flow is not None:
            msg += f" for {flow.value} entries"
        super().__init__(msg)


SELF_SERVICE_OPTIONS: tuple[OccurrenceOption, ...] = (
    OccurrenceOption("BH Positivo", RecordType.CREDIT),
    OccurrenceOption("BH Negativo", RecordType.DEBIT),
    OccurrenceOption("Compensação de horas positivas", RecordType.DEBIT),
    OccurrenceOption("Falta do dia inteiro", RecordType.DEBIT),
    OccurrenceOption("Ausência de Batida", RecordType.NEUTRAL, regularization=True),
    OccurrenceOption("Pagamento de horas", RecordType.DEBIT),
    OccurrenceOption("Exame periódico", RecordType.NEUTRAL),
    OccurrenceOption("Atrasos e saídas antecipadas (desconto em folha)", RecordType.NEUTRAL),
    OccurrenceOption("Liberação por atestado médico", RecordType.NEUTRAL),
)

MANUAL_OPTIONS: tuple[OccurrenceOption, ...] = (
    OccurrenceOption("Ajuste de Ponto (Esquecimento)", RecordType.CREDIT),
    OccurrenceOption("Trabalho Externo", RecordType.CREDIT),
    OccurrenceOption("Batida Esquecida (Regularização)", RecordType.NEUTRAL, regularization=True),
    OccurrenceOption("Hora Extra", RecordType.CREDIT),
    OccurrenceOption("Falta Não Justificada", RecordType.DEBIT),
    OccurrenceOption("Suspensão", RecordType.DEBIT),
    OccurrenceOption("Saída Antecipada", RecordType.DEBIT),
    OccurrenceOption("Atestado Médico", RecordType.NEUTRAL),
    OccurrenceOption("Falta Justificada", RecordType.NEUTRAL),
)

BULK_OPTIONS: tuple[OccurrenceOption, ...] = (
    OccurrenceOption("BH Positivo (Crédito)", RecordType.CREDIT),
    OccurrenceOption("BH Negativo (Débito)", RecordType.DEBIT),
    OccurrenceOption("Ajuste de Ponto (Manual)", RecordType.NEUTRAL, regularization=True),
)

OCCURRENCE_TABLES: dict[EntryFlow, dict[str, OccurrenceOption]] = {
    EntryFlow.SELF_SERVICE: {o.label: o for o in SELF_SERVICE_OPTIONS},
    EntryFlow.MANUAL: {o.label: o for o in MANUAL_OPTIONS},
    EntryFlow.BULK: {o.label: o for o in BULK_OPTIONS},
}


def options_for(flow: EntryFlow) -> list[OccurrenceOption]:
    """Labels offered by an entry flow, in display order."""
    return list(OCCURRENCE_TABLES[flow].values())


def classify(label: str, flow: EntryFlow) -> OccurrenceOption:
    """Resolve a label within one flow's table."""
    option = OCCURRENCE_TABLES[flow].get(label)
    if option is None:
        raise UnknownOccurrenceError(label, flow)
    return option


def classify_any(label: str, preferred: EntryFlow | None = None) -> OccurrenceOption:
    """Resolve a label against every table, trying ``preferred`` first.

    Used when editing a record whose originating flow is not stored.
    """
    flows = list(EntryFlow)
    if preferred is not None:
        flows.remove(preferred)
        flows.insert(0, preferred)
    for flow in flows:
        option = OCCURRENCE_TABLES[flow].get(label)
        if option is not None:
            return option
    raise UnknownOccurrenceError(label)
