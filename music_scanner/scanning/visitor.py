import os
import time
import logging
from pathlib import Path
from typing import Callable, Optional

from ..database.ops import CatalogOperations
from ..metadata.tags import TagReader
from ..models import ScanSummary
from .classify import Classifier, EntryKind
from .finalize import FolderFinalizer
from .scope import ScopeStack
from .upsert import EntityUpserter


class LibraryVisitor:
    """
    The catalog side of a walk: descend upserts, ascend finalizes.
    Owns its scope stack, so a fresh visitor is needed per scan.
    """

    def __init__(self,
                 ops: CatalogOperations,
                 tag_reader: TagReader,
                 classifier: Optional[Classifier] = None,
                 clock: Callable[[], float] = time.time):
        self.classifier = classifier or Classifier()
        self.scope = ScopeStack()
        self.summary = ScanSummary()
        self.upserter = EntityUpserter(ops, tag_reader, self.scope, self.summary, clock)
        self.finalizer = FolderFinalizer(ops, self.scope, clock)

    def enter_directory(self, path: Path, stat: os.stat_result):
        self.upserter.upsert_folder(path, stat)

    def visit_file(self, path: Path, stat: os.stat_result):
        classification = self.classifier.classify(path, is_dir=False)

        if classification.kind == EntryKind.COVER:
            self.upserter.upsert_cover(path, stat)
        elif classification.kind == EntryKind.AUDIO:
            self.upserter.upsert_track(path, stat, classification)
        else:
            self.summary.ignored_files += 1
            logging.debug(f"Ignoring {path}")

    def leave_directory(self, path: Path):
        self.finalizer.finalize(path)
