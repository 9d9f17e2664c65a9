"""
Upload coordinator.

Orchestrates the upload process using injected dependencies:
validate, classify, plan, encrypt, dispatch, correlate, aggregate.
"""
import asyncio
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from .models import ChunkInfo, UploadConfig, UploadProgress, UploadResult, UploadTask
from .protocols import ApiClientProtocol, FileReaderProtocol, ParamsEncryptorProtocol
from .registry import PendingCompletionRegistry
from .services import (
    AsyncFileReader,
    ChunkDispatcher,
    ChunkPlanner,
    ClientIdGenerator,
    CompletionCorrelator,
    FileClassifier,
    PreconditionValidator,
)
from ..context import AppContext, MessageType
from ..crypto import FileHasher, ParamsCipher
from ..exceptions import NotFoundError
from ..logging import get_logger

logger = get_logger('zalopy.upload.coordinator')


class UploadCoordinator:
    """
    Coordinates attachment uploads.

    Uses dependency injection for all components, making it:
    - Testable (mock the API client and the registry)
    - Extensible (swap encryptor, reader, hasher)

    Every chunk of every file is dispatched concurrently. The chunk id in
    each file's parameter template is advanced synchronously right after
    the chunk's parameters are encrypted, so the server sees 1..n per file
    whatever order the responses come back in.
    """

    def __init__(
        self,
        api_client: ApiClientProtocol,
        context: AppContext,
        service_url: str,
        registry: Optional[PendingCompletionRegistry] = None,
        encryptor: Optional[ParamsEncryptorProtocol] = None,
        file_reader: Optional[FileReaderProtocol] = None,
        hasher: Optional[FileHasher] = None,
        id_generator: Optional[ClientIdGenerator] = None,
        progress_callback: Optional[Callable[[UploadProgress], None]] = None
    ):
        """
        Initialize upload coordinator.

        Args:
            api_client: API client used to post chunks
            context: Session context
            service_url: File service base URL
            registry: Pending-completion registry shared with the listener
            encryptor: Parameter encryptor (defaults to the session key cipher)
            file_reader: File reader implementation
            hasher: File checksum service
            id_generator: Client file id generator
            progress_callback: Optional callback for progress updates
        """
        self._api = api_client
        self._context = context
        self._service_url = service_url
        self._registry = registry if registry is not None else PendingCompletionRegistry()
        self._encryptor = encryptor
        self._file_reader = file_reader or AsyncFileReader()
        self._hasher = hasher or FileHasher()
        self._ids = id_generator or ClientIdGenerator()
        self._validator = PreconditionValidator()
        self._progress_callback = progress_callback

    @property
    def registry(self) -> PendingCompletionRegistry:
        return self._registry

    async def upload(
        self,
        file_paths: Sequence[Union[str, Path]],
        thread_id: str,
        message_type: MessageType = MessageType.DIRECT_MESSAGE,
        config: Optional[UploadConfig] = None
    ) -> List[UploadResult]:
        """
        Upload attachments to a thread.

        Args:
            file_paths: Paths of the files to upload
            thread_id: User or group id
            message_type: Direct or group thread
            config: Upload configuration

        Returns:
            Upload results, in completion order unless config.ordered is set

        Raises:
            ConfigurationError: If the session context is incomplete
            InvalidArgumentError: If arguments are missing or over the limit
            NotFoundError: If a file does not exist
            PolicyError: If a file is restricted or too large
            CryptoError: If parameters cannot be encrypted
            ServerError: If the server rejects a chunk
            CompletionTimeoutError: If a completion push times out
        """
        config = config or UploadConfig()
        self._validator.validate(self._context, file_paths, thread_id)

        is_group = message_type == MessageType.GROUP_MESSAGE
        tasks = await self._plan_tasks(file_paths, thread_id, is_group)

        total_chunks = sum(task.chunk_count for task in tasks)
        total_bytes = sum(task.metadata.total_size for task in tasks)
        total_mb = total_bytes / (1024 * 1024)
        logger.info(
            f"Starting upload: {len(tasks)} file(s), {total_chunks} chunk(s), {total_mb:.2f} MB"
        )

        semaphore = (
            asyncio.Semaphore(config.max_concurrent_requests)
            if config.max_concurrent_requests else None
        )
        dispatcher = ChunkDispatcher(self._api, self._service_url)
        correlator = CompletionCorrelator(self._registry, self._hasher, config.completion_timeout)
        progress = UploadProgress(total_chunks=total_chunks, total_bytes=total_bytes)

        results: List[Tuple[int, UploadResult]] = []
        upload_start = time.time()
        await self._dispatch_all(
            tasks, is_group, dispatcher, correlator, results, progress, semaphore
        )

        elapsed = time.time() - upload_start
        logger.info(f"Upload finished: {len(results)} result(s) in {elapsed:.2f}s")

        if config.ordered:
            results.sort(key=lambda item: item[0])
        return [result for _, result in results]

    async def _plan_tasks(
        self,
        file_paths: Sequence[Union[str, Path]],
        thread_id: str,
        is_group: bool
    ) -> List[UploadTask]:
        """Classify every file and build its upload plan."""
        settings = self._context.settings
        classifier = FileClassifier(settings)
        planner = ChunkPlanner(settings.chunk_size_file, self._ids)

        tasks = []
        for index, file_path in enumerate(file_paths):
            path, category, metadata = await classifier.classify(file_path)
            task = planner.plan(
                index, path, category, metadata, thread_id, self._context.imei, is_group
            )
            if task.chunk_count == 0:
                logger.warning(f"{metadata.file_name} is empty, nothing to upload")
            tasks.append(task)
        return tasks

    def _get_encryptor(self) -> ParamsEncryptorProtocol:
        if self._encryptor is not None:
            return self._encryptor
        return ParamsCipher(self._context.secret_key)

    async def _dispatch_all(
        self,
        tasks: List[UploadTask],
        is_group: bool,
        dispatcher: ChunkDispatcher,
        correlator: CompletionCorrelator,
        results: List[Tuple[int, UploadResult]],
        progress: UploadProgress,
        semaphore: Optional[asyncio.Semaphore] = None
    ) -> None:
        """
        Dispatch every chunk and wait for all units.

        Fails fast: the first error cancels the remaining units and
        propagates. Chunks already accepted by the server are left as is.
        """
        encryptor = self._get_encryptor()
        units: List[asyncio.Task] = []
        try:
            for task in tasks:
                for chunk in task.chunks:
                    encrypted = encryptor.encrypt_params(task.params.to_dict())
                    url = dispatcher.build_url(task.category, is_group, encrypted)
                    units.append(asyncio.ensure_future(self._run_unit(
                        task, chunk, url, dispatcher, correlator, results, progress, semaphore
                    )))
                    task.params.chunk_id += 1

            await asyncio.gather(*units)
        except BaseException as e:
            pending = [unit for unit in units if not unit.done()]
            if pending:
                logger.error(f"Upload failed, cancelling {len(pending)} pending unit(s): {e}")
                for unit in pending:
                    unit.cancel()
                await asyncio.gather(*pending, return_exceptions=True)
            for unit in units:
                if unit.done() and not unit.cancelled():
                    unit.exception()
            raise

    async def _run_unit(
        self,
        task: UploadTask,
        chunk: ChunkInfo,
        url: str,
        dispatcher: ChunkDispatcher,
        correlator: CompletionCorrelator,
        results: List[Tuple[int, UploadResult]],
        progress: UploadProgress,
        semaphore: Optional[asyncio.Semaphore] = None
    ) -> None:
        """Upload one chunk and, for a final acknowledgment, collect its result."""
        # A slot covers the read and the request, not the wait for a push
        if semaphore is None:
            response = await self._send_chunk(task, chunk, url, dispatcher)
        else:
            async with semaphore:
                response = await self._send_chunk(task, chunk, url, dispatcher)

        progress.uploaded_chunks += 1
        progress.uploaded_bytes += chunk.size
        logger.debug(f"Progress: {progress.percentage:.1f}%")
        if self._progress_callback:
            self._progress_callback(progress)

        if response is None:
            return

        result = await correlator.complete(task, response)
        results.append((task.index, result))

    async def _send_chunk(
        self,
        task: UploadTask,
        chunk: ChunkInfo,
        url: str,
        dispatcher: ChunkDispatcher
    ) -> Optional[Dict[str, Any]]:
        """Read one chunk from disk and post it."""
        file_name = task.metadata.file_name
        try:
            data = await self._file_reader.read_chunk(task.file_path, chunk.start, chunk.end)
        except OSError as e:
            raise NotFoundError(
                f"Failed to read chunk {chunk.index + 1} of {file_name}: {e}",
                path=str(task.file_path)
            ) from e

        if len(data) != chunk.size:
            raise NotFoundError(
                f"Failed to read chunk {chunk.index + 1} of {file_name}: "
                f"expected {chunk.size} bytes, got {len(data)} (file changed?)",
                path=str(task.file_path)
            )

        return await dispatcher.dispatch(task, chunk, data, url)
