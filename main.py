import asyncio
import logging
from templateshop.bot import DigitalShopBot
from templateshop.config import Config, setup_logging
from templateshop.database.database import Database

async def main():
    # Setup logging
    setup_logging()
    logger = logging.getLogger(__name__)

    db = Database(Config.DATABASE_URL, Config.DB_POOL_MIN, Config.DB_POOL_MAX)
    bot = None
    try:
        Config.validate()
        await db.connect()

        bot = DigitalShopBot(db)
        logger.info("Starting shop...")
        await bot.start()
        await asyncio.Event().wait()
    except Exception as e:
        logger.error(f"Error starting shop: {e}", exc_info=True)
        raise
    finally:
        if bot:
            await bot.stop()
        await db.close()

if __name__ == "__main__":
    asyncio.run(main())
