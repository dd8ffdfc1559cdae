# Python Imports
import asyncio
import logging
import threading
from typing import Iterable

# Project Imports
from solana_rpc.api import Api
from solana_rpc.result import Failure, Result
from solana_rpc.templates import ApiTemplate

TemplateResult = tuple[ApiTemplate, Result]

logger = logging.getLogger(__name__)


async def launch_templates(api: Api, templates: list[ApiTemplate], done_queue: asyncio.Queue[tuple[int, Result]],
                           intermediate_delay: float = 0, max_in_flight: int = 0) -> None:
    loop = asyncio.get_running_loop()
    sem = asyncio.Semaphore(max_in_flight) if max_in_flight > 0 else None

    for index, template in enumerate(templates):
        if sem is not None:
            await sem.acquire()

        logger.debug(f"Launching template {template!r}")

        delivered = threading.Event()
        guard = threading.Lock()

        def _claim(d=delivered, g=guard) -> bool:
            with g:
                if d.is_set():
                    return False
                d.set()
                return True

        def _on_done(result: Result, i=index, claim=_claim) -> None:
            if not claim():
                logger.error(f"Template {i} completed more than once; dropped {result!r}")
                return
            # Routers may complete on any thread
            loop.call_soon_threadsafe(_put, i, result)

        def _put(i: int, result: Result) -> None:
            if sem is not None:
                sem.release()
            done_queue.put_nowait((i, result))

        try:
            template.perform(api, _on_done)
        except Exception as e:
            logger.error(f"Template {template!r} failed to start: {e}")
            # Only counts when no completion arrived before the error
            if _claim():
                _put(index, Failure(e))

        if intermediate_delay:
            await asyncio.sleep(intermediate_delay)


async def collect_results(done_queue: asyncio.Queue[tuple[int, Result]], total: int) -> list[Result]:
    results: list[Result] = [None] * total
    for _ in range(total):
        index, result = await done_queue.get()
        if isinstance(result, Failure):
            logger.error(f"Template {index} failed: {result.error!r}")
        else:
            logger.debug(f"Template {index} completed")
        results[index] = result
    return results


async def perform_templates(api: Api, templates: Iterable[ApiTemplate], max_in_flight: int = 0,
                            intermediate_delay: float = 0) -> list[TemplateResult]:
    templates = list(templates)
    done_queue: asyncio.Queue[tuple[int, Result]] = asyncio.Queue()

    launcher = asyncio.create_task(launch_templates(api, templates, done_queue, intermediate_delay, max_in_flight))
    results = await collect_results(done_queue, len(templates))
    await launcher

    logger.info(f"Performed {len(templates)} templates, "
                f"{sum(1 for r in results if isinstance(r, Failure))} failed")
    return list(zip(templates, results))
