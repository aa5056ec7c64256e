"""Startup rehydration: rebuild in-memory indexes from durable manifests."""

from common.exceptions import ManifestCorruptError
from common.logging_config import get_logger
from common.types import BootstrapReport
from dedupserver.indexes import StoreState
from dedupserver.repositories.manifest_repository import ManifestRepository

logger = get_logger(__name__)


class Bootstrapper:
    """
    Reads every manifest record once and loads it into StoreState.

    Unparsable records are skipped with a warning unless strict is set,
    in which case the first one aborts startup.
    """

    def __init__(self, manifest_repo: ManifestRepository, state: StoreState, strict: bool = False):
        self.manifest_repo = manifest_repo
        self.state = state
        self.strict = strict

    def run(self) -> BootstrapReport:
        """
        Populate FileIndex and SignatureIndex from disk.

        Returns:
            BootstrapReport with recovered file and signature counts

        Raises:
            ManifestCorruptError: If strict and a record cannot be parsed
        """
        skipped = 0
        for result in self.manifest_repo.list():
            if not result.ok:
                if self.strict:
                    logger.error(f"Refusing to start: corrupt manifest {result.path}")
                    raise ManifestCorruptError(str(result.error)) from result.error
                logger.warning(f"Skipping corrupt manifest {result.path.name}: {result.error}")
                skipped += 1
                continue
            self.state.load_manifest(result.manifest)

        counts = self.state.counts()
        report = BootstrapReport(files=counts["files"], signatures=counts["signatures"], skipped=skipped)
        logger.info(
            f"Bootstrapped {report.files} file records; {report.signatures} unique signatures"
            + (f"; skipped {report.skipped} corrupt manifests" if report.skipped else "")
        )
        return report
