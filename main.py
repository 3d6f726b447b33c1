import json
import sys
import time
from pprint import pprint

import solswaps
from solswaps.logger import setup_console_logging
from solswaps.settings import get_settings

if __name__ == "__main__":
    setup_console_logging(get_settings().log_level)

    with open(sys.argv[1], "r") as f:
        tx = json.load(f)

    print("## NORMALIZED")
    normalized = solswaps.normalize(tx)
    pprint(normalized)
    print("-" * 100)
    print("## PARSED")
    start = time.time()
    parsed = solswaps.parse(normalized)
    end = time.time()
    print(f"Time taken: {end - start} seconds")
    pprint(parsed)
    print("-" * 100)
    print("## RESOLVED")
    resolved = solswaps.resolve(parsed)
    pprint(resolved.to_dict())
