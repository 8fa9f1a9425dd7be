"""
Точка входа для запуска модуля.

    python -m azure_ipam [команда] [опции]

Примеры:
    python -m azure_ipam refresh
    python -m azure_ipam poll --interval 30
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
