# src/field_bldr/context.py
from dataclasses import dataclass
import logging
from typing import Optional

from .controller import FieldDefinitionController
from .instrumentation import Signals
from .spec_reader import SpecReader
from .submission_dump import SubmissionDumper
from .transport import HttpSubmissionTransport

@dataclass
class AppContext:
    logger: logging.Logger
    signals: Signals
    transport: HttpSubmissionTransport
    controller: FieldDefinitionController
    reader: SpecReader
    dumper: Optional[SubmissionDumper] = None
