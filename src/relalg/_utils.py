'''
Misc internal utilities

'''
import os

from pathlib import Path


default_datadir: Path = Path.home() / '.relalg'


def get_root_datadir() -> Path:
    return Path(os.getenv('RELALG_DATADIR', default_datadir))


def get_loglevel() -> str:
    return os.getenv('RELALG_LOGLEVEL', 'info')
