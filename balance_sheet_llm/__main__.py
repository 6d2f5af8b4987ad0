# balance_sheet_llm/__main__.py
import sys

from balance_sheet_llm.main import main

sys.exit(main())
