# Python Imports
import asyncio
import sys

# Project Imports
from solana_rpc.logger import configure_logging, get_logger
from solana_rpc import Api, GetBlockHeight, GetBlockTime, GetFirstAvailableBlock, Success, load_config, \
    perform_templates

logger = get_logger(__name__)


async def block_times(blocks: list[int]):
    config = load_config()
    async with Api.from_config(config) as api:
        slot = await api.aget_slot()
        logger.info(f"Current slot: {slot}")

        templates = [GetBlockHeight(), GetFirstAvailableBlock(), GetBlockTime(slot)]
        templates += [GetBlockTime(block) for block in blocks]
        results = await perform_templates(api, templates, max_in_flight=config.max_in_flight)

        for template, result in results:
            logger.trace(f"{template!r} -> {result!r}")
            if isinstance(result, Success):
                logger.info(f"{template}: {result.value}")
            else:
                logger.error(f"{template}: {result.error!r}")


if __name__ == "__main__":
    configure_logging()
    asyncio.run(block_times([int(arg) for arg in sys.argv[1:]]))
