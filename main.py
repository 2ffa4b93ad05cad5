"""Executa a análise CAPM a partir da raiz do repositório.

Equivalente ao comando ``capm-quant`` instalado pelo pacote, por exemplo::

    python main.py analyze --config configs/capm_aapl.yaml
"""

import sys

from capm_quant.cli import main

if __name__ == "__main__":
    sys.exit(main())
