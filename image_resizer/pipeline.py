"""
Batch orchestration for the resize pipeline.

This module provides the ImageResizer class that drives located images
through the decode, transform and write stages, either one file at a
time on the calling thread or as three concurrent generations separated
by barriers.
"""

from __future__ import annotations

import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from functools import partial
from pathlib import Path
from typing import Callable, List, Optional, Sequence, TypeVar, Union

from .codecs.base import ImageCodec
from .codecs.pillow_codec import PillowCodec
from .config import ResizeConfig, validate_scale
from .exceptions import BatchError, ResizerError
from .locator import find_images
from .report import BatchReport, OutputRecord
from .stages import decode_image, transform_image, write_artifact
from .storage import clean_directory, ensure_directory
from .types import DecodedImage, EncodedArtifact, ImageTask

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
T = TypeVar("T")
R = TypeVar("R")


class BatchState(str, Enum):
    """Lifecycle of a concurrent batch."""

    SCANNING = "scanning"
    DECODING = "decoding"
    TRANSFORMING = "transforming"
    WRITING = "writing"
    DONE = "done"
    FAILED = "failed"


class ImageResizer:
    """
    Resizes every image in a directory tree into a destination directory.

    The resizer holds only immutable settings; all per-batch state lives
    inside a single call, so one instance can serve several batches.
    """

    def __init__(
        self,
        codec: Optional[ImageCodec] = None,
        config: Optional[ResizeConfig] = None,
    ):
        """
        Initialize the resizer.

        Args:
            codec: Image codec backend (defaults to PillowCodec)
            config: Output and concurrency settings; its ``scale`` and
                ``concurrent`` fields are used by ``run`` only
        """
        self.codec = codec or PillowCodec()
        self.config = config or ResizeConfig()

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------
    def run(
        self,
        source_dir: PathLike,
        dest_dir: PathLike,
        scale: Optional[float] = None,
        concurrent: Optional[bool] = None,
    ) -> BatchReport:
        """Resize a batch using the configured (or given) scale and mode."""
        scale = self.config.scale if scale is None else scale
        concurrent = self.config.concurrent if concurrent is None else concurrent

        if concurrent:
            return asyncio.run(self.resize_images_async(source_dir, dest_dir, scale))
        return self.resize_images(source_dir, dest_dir, scale)

    def resize_images(
        self, source_dir: PathLike, dest_dir: PathLike, scale: float
    ) -> BatchReport:
        """
        Resize all images sequentially on the calling thread.

        The first failing file aborts the batch. Files written before the
        failure are left in place.

        Args:
            source_dir: Directory scanned recursively for images
            dest_dir: Output directory, created if missing
            scale: Positive scale factor applied to both dimensions

        Returns:
            BatchReport listing every written file

        Raises:
            ValueError: If ``scale`` is not a positive finite number
            ResizerError: On the first stage failure
        """
        scale = validate_scale(scale)
        started = time.perf_counter()
        dest = ensure_directory(dest_dir)
        tasks = self._locate(source_dir, dest)

        logger.info(
            "Resizing %d image(s) from %s to %s at scale %s (sequential)",
            len(tasks),
            source_dir,
            dest,
            scale,
        )

        outputs: List[OutputRecord] = []
        for task in tasks:
            try:
                decoded = decode_image(task, self.codec)
                artifact = self._transform(decoded, scale)
                del decoded
                output_path = self._write(artifact, dest)
            except ResizerError as exc:
                logger.error("Batch aborted: %s", exc)
                raise
            outputs.append(_record(artifact, output_path))

        return self._report("sequential", scale, source_dir, dest, outputs, started)

    async def resize_images_async(
        self, source_dir: PathLike, dest_dir: PathLike, scale: float
    ) -> BatchReport:
        """
        Resize all images in three concurrent generations.

        Every decode runs before any transform and every transform before
        any write. Within a generation one job per image runs on a thread
        pool; the generation ends only when all of its jobs have finished.
        If any job failed, the batch stops there with a BatchError
        listing all failures of that generation.

        Args:
            source_dir: Directory scanned recursively for images
            dest_dir: Output directory, created if missing
            scale: Positive scale factor applied to both dimensions

        Returns:
            BatchReport listing every written file

        Raises:
            ValueError: If ``scale`` is not a positive finite number
            DirectoryError: If the source cannot be scanned
            BatchError: If any job in a generation failed
        """
        scale = validate_scale(scale)
        started = time.perf_counter()
        state = BatchState.SCANNING
        logger.debug("Batch state: %s", state.value)

        dest = await asyncio.to_thread(ensure_directory, dest_dir)
        tasks = await asyncio.to_thread(self._locate, source_dir, dest)

        logger.info(
            "Resizing %d image(s) from %s to %s at scale %s (concurrent)",
            len(tasks),
            source_dir,
            dest,
            scale,
        )

        if not tasks:
            state = BatchState.DONE
            logger.debug("Batch state: %s", state.value)
            return self._report("concurrent", scale, source_dir, dest, [], started)

        workers = self.config.max_workers or len(tasks)
        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="image-resizer"
        ) as executor:
            try:
                state = BatchState.DECODING
                logger.debug("Batch state: %s", state.value)
                decoded: List[DecodedImage] = await self._run_generation(
                    executor, partial(decode_image, codec=self.codec), tasks, "decode"
                )

                state = BatchState.TRANSFORMING
                logger.debug("Batch state: %s", state.value)
                artifacts: List[EncodedArtifact] = await self._run_generation(
                    executor, partial(self._transform, scale=scale), decoded, "transform"
                )
                del decoded

                state = BatchState.WRITING
                logger.debug("Batch state: %s", state.value)
                output_paths: List[Path] = await self._run_generation(
                    executor, partial(self._write, dest_dir=dest), artifacts, "write"
                )
            except BatchError:
                logger.debug(
                    "Batch state: %s (from %s)", BatchState.FAILED.value, state.value
                )
                raise

        outputs = [
            _record(artifact, path) for artifact, path in zip(artifacts, output_paths)
        ]
        del artifacts

        state = BatchState.DONE
        logger.debug("Batch state: %s", state.value)
        return self._report("concurrent", scale, source_dir, dest, outputs, started)

    def clean(self, dest_dir: PathLike) -> int:
        """Remove all files below ``dest_dir``; see storage.clean_directory."""
        return clean_directory(dest_dir)

    # ------------------------------------------------------------------
    # Stage helpers
    # ------------------------------------------------------------------
    def _locate(self, source_dir: PathLike, dest: Path) -> List[ImageTask]:
        return [ImageTask.from_path(path, dest) for path in find_images(source_dir)]

    def _transform(self, decoded: DecodedImage, scale: float) -> EncodedArtifact:
        return transform_image(
            decoded,
            scale,
            self.codec,
            output_format=self.config.output_format,
            quality=self.config.quality,
            resample=self.config.resample,
        )

    def _write(self, artifact: EncodedArtifact, dest_dir: Path) -> Path:
        return write_artifact(artifact, dest_dir, extension=self.config.output_extension)

    async def _run_generation(
        self,
        executor: ThreadPoolExecutor,
        job: Callable[[T], R],
        items: Sequence[T],
        stage: str,
    ) -> List[R]:
        """
        Run ``job`` on every item concurrently and wait for all of them.

        Results come back in the order of ``items``. Failures do not cancel
        sibling jobs; they are collected and raised together once the whole
        generation has finished.
        """
        loop = asyncio.get_running_loop()
        futures = [loop.run_in_executor(executor, job, item) for item in items]
        results = await asyncio.gather(*futures, return_exceptions=True)

        errors: List[ResizerError] = []
        for result in results:
            if isinstance(result, ResizerError):
                errors.append(result)
            elif isinstance(result, BaseException):
                # Unexpected failures are reported like stage errors
                error = ResizerError(f"Unexpected {stage} failure: {result!r}")
                error.__cause__ = result
                errors.append(error)

        if errors:
            for error in errors:
                logger.error("%s failed: %s", stage, error)
            batch_error = BatchError.for_stage(stage, errors)
            raise batch_error from errors[0]

        logger.debug("Generation %s finished for %d item(s)", stage, len(items))
        return list(results)

    def _report(
        self,
        mode: str,
        scale: float,
        source_dir: PathLike,
        dest: Path,
        outputs: List[OutputRecord],
        started: float,
    ) -> BatchReport:
        elapsed = time.perf_counter() - started
        logger.info("Wrote %d image(s) to %s in %.2fs", len(outputs), dest, elapsed)
        return BatchReport(
            mode=mode,
            scale=scale,
            source_dir=Path(source_dir),
            dest_dir=dest,
            outputs=outputs,
            elapsed_seconds=elapsed,
        )


def _record(artifact: EncodedArtifact, output_path: Path) -> OutputRecord:
    return OutputRecord(
        base_name=artifact.base_name,
        source_path=artifact.source_path,
        output_path=output_path,
        width=artifact.width,
        height=artifact.height,
    )


def resize_images(
    source_dir: PathLike,
    dest_dir: PathLike,
    scale: float,
    concurrent: bool = False,
    config: Optional[ResizeConfig] = None,
) -> BatchReport:
    """Resize a directory of images with a default Pillow-backed resizer."""
    return ImageResizer(config=config).run(
        source_dir, dest_dir, scale=scale, concurrent=concurrent
    )


async def resize_images_async(
    source_dir: PathLike,
    dest_dir: PathLike,
    scale: float,
    config: Optional[ResizeConfig] = None,
) -> BatchReport:
    """Concurrent variant of resize_images for callers already in an event loop."""
    return await ImageResizer(config=config).resize_images_async(
        source_dir, dest_dir, scale
    )


def clean(dest_dir: PathLike) -> int:
    """Remove all files below ``dest_dir``, creating it when missing."""
    return clean_directory(dest_dir)
