"""Type inference, categorical encoding and invalid-value tracking."""

from .datatype import Datatype, TypeRegistry  # noqa: F401
from .ingest import MappedDataset, map_dataset  # noqa: F401
from .ledger import INVALID_SENTINEL, InvalidEntry, InvalidValueLedger  # noqa: F401
from .mapper import DatasetMapper  # noqa: F401
from .policies import AssigningPolicy, MappingPolicy, ValidatingPolicy, make_policy  # noqa: F401
from .reports import RangeViolation, check_range, ledger_frame, mapping_summary  # noqa: F401
from .serialization import load_mapper, mapper_from_dict, mapper_to_dict, save_mapper  # noqa: F401
from .tables import MappingTable, TokenTable  # noqa: F401
from .tokens import count_non_numeric, is_categorical_batch, is_numeric, parse_numeric  # noqa: F401
