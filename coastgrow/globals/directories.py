import os
import pathlib as pl

# Project root for config/logs; override with COASTGROW_HOME
BASE_DIR = pl.Path(os.environ.get("COASTGROW_HOME", pl.Path.cwd()))

LOGS_DIR = BASE_DIR / "logs"

# CONFIGURATION DIRECTORIES -----------
CONFIG_DIR = BASE_DIR / "config"

if __name__ == '__main__':
    print(f"{BASE_DIR=}")
    print(f"{CONFIG_DIR=}")
    print(f"{LOGS_DIR=}")
