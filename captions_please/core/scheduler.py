"""Job scheduler - a bounded asyncio worker pool for activity jobs."""

import asyncio
from typing import AsyncIterator

from captions_please.config import ActivityConfig
from captions_please.core.orchestrator import ActivityProcessor
from captions_please.exceptions import (
    CaptionsError,
    ErrorKind,
    JobTimeoutError,
    SchedulerClosedError,
    classify,
)
from captions_please.logging import get_logger, job_context
from captions_please.models.activity import ActivityJob, ActivityNotification, ActivityResult
from captions_please.models.post import Post


class ActivityScheduler:
    """
    Runs ActivityJobs on a fixed number of workers fed by a bounded queue.

    Example:
        async with ActivityScheduler(config, processor) as scheduler:
            async for result in scheduler.handle_notification(notification):
                print(result.action, result.error)
    """

    def __init__(self, config: ActivityConfig, processor: ActivityProcessor):
        self.config = config
        self.processor = processor
        self._queue: asyncio.Queue | None = None
        self._workers: list[asyncio.Task] = []
        self._closed = False
        self._stopped = False
        self._log = get_logger("scheduler")

    @property
    def closed(self) -> bool:
        return self._closed

    async def start(self) -> None:
        """Spawn the worker tasks."""
        if self._queue is not None:
            return
        self._queue = asyncio.Queue(maxsize=self.config.max_outstanding_jobs)
        self._workers = [
            asyncio.create_task(self._worker(n), name=f"activity-worker-{n}")
            for n in range(self.config.workers)
        ]
        self._log.info(
            "scheduler_started",
            workers=self.config.workers,
            max_outstanding_jobs=self.config.max_outstanding_jobs,
        )

    async def close(self) -> None:
        """
        Stop accepting jobs and wait for the workers to finish.

        Jobs already queued still run. Anything left behind once the
        workers have stopped resolves with a shutdown error.
        """
        if self._closed:
            return
        self._closed = True
        if self._queue is None:
            return

        # One stop marker per worker, queued behind the outstanding jobs
        for _ in self._workers:
            await self._queue.put(None)
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._stopped = True
        self._drain()
        self._log.info("scheduler_closed")

    async def __aenter__(self) -> "ActivityScheduler":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def submit(self, bot_id: str, post: Post) -> ActivityJob:
        """
        Queue a post for processing.

        Waits for a free slot for at most ``enqueue_timeout_seconds``. The
        returned job's future is already resolved if the job was refused.

        Args:
            bot_id: The bot account id
            post: The post that may mention the bot

        Returns:
            ActivityJob whose ``out`` future receives the result
        """
        job = ActivityJob(bot_id=bot_id, post=post)
        if self._closed or self._queue is None:
            job.resolve(ActivityResult(
                post=post,
                action="refused, scheduler closed",
                error=SchedulerClosedError(),
            ))
            return job

        try:
            self._queue.put_nowait(job)
        except asyncio.QueueFull:
            try:
                await asyncio.wait_for(self._queue.put(job), timeout=self.config.enqueue_timeout_seconds)
            except asyncio.TimeoutError:
                self._log.info("enqueue_timeout", post_id=post.id, timeout=self.config.enqueue_timeout_seconds)
                job.resolve(ActivityResult(
                    post=post,
                    action="gave up waiting for a worker",
                    error=JobTimeoutError(f"no free slot after {self.config.enqueue_timeout_seconds}s"),
                ))
                return job

        if self._stopped:
            # Slipped in after the workers exited
            self._drain()
        return job

    async def handle_notification(self, notification: ActivityNotification) -> AsyncIterator[ActivityResult]:
        """
        Turn an activity notification into results, yielded as jobs finish.

        Args:
            notification: Parsed account activity

        Yields:
            One ActivityResult per post, or a single result when the whole
            notification is skipped
        """
        if notification.user_has_blocked:
            yield ActivityResult(action="ignoring blocked user")
            return
        if not notification.posts:
            yield ActivityResult(action="no creation events")
            return
        if not notification.bot_id:
            yield ActivityResult(
                action="parse notification",
                error=CaptionsError("notification has no bot id", kind=ErrorKind.UNKNOWN),
            )
            return

        async def run(post: Post) -> ActivityResult:
            job = await self.submit(notification.bot_id, post)
            return await job.out

        for next_result in asyncio.as_completed([run(post) for post in notification.posts]):
            yield await next_result

    async def _worker(self, number: int) -> None:
        log = self._log.bind(worker=number)
        while True:
            job = await self._queue.get()
            try:
                if job is None:
                    return
                with job_context(job.post.id, worker=number):
                    result = await self.processor.process(job)
                if not job.resolve(result):
                    log.warning("job_already_resolved", post_id=job.post.id)
            except asyncio.CancelledError:
                if job is not None:
                    job.resolve(self._shutdown_result(job))
                raise
            except Exception as e:
                log.exception("worker_job_failed", post_id=job.post.id)
                job.resolve(ActivityResult(post=job.post, action="process post", error=classify(e)))
            finally:
                self._queue.task_done()

    def _drain(self) -> None:
        while True:
            try:
                job = self._queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            self._queue.task_done()
            if job is not None:
                job.resolve(self._shutdown_result(job))

    @staticmethod
    def _shutdown_result(job: ActivityJob) -> ActivityResult:
        return ActivityResult(
            post=job.post,
            action="dropped on shutdown",
            error=SchedulerClosedError("scheduler stopped before the job ran"),
        )
