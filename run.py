#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 08:12:31
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Entry point
"""
# ========================================================
# IMPORTS
# ========================================================
import logging
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from config import BACKUP_DIR, HOST, PORT, APP_NAME, VERSION, LOG_LEVEL


# ========================================================
# FUNCTIONS
# ========================================================
def main():
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    logger = logging.getLogger("trm")

    from trm.app import create_app
    from trm.backup_manager import BackupManager
    from trm.db import engine, SessionLocal

    app = create_app(SessionLocal)

    # Start the backup thread once
    backup_manager = BackupManager(engine, SessionLocal, BACKUP_DIR)
    backup_manager.start()

    logger.info("%s v%s running on http://%s:%s", APP_NAME, VERSION, HOST,
                PORT)
    app.run(host=HOST, port=PORT, debug=False)


# ========================================================
# MAIN
# ========================================================
if __name__ == "__main__":
    main()
