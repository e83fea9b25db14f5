"""Block explorer pages -- file templates, inheritance, loops, fallback.

Renders a home page that extends a base layout, an htmx fragment with a
loop, and a fragment whose data is missing to show the fallback output.

Run:
    python app.py
"""

import logging
from pathlib import Path

from trellis import Environment, FileSystemLoader

logging.basicConfig(level=logging.INFO)

templates_dir = Path(__file__).parent / "templates"
env = Environment(loader=FileSystemLoader(str(templates_dir)))

blocks = [
    {"height": 3129442, "num_txes": 4, "size": "12.1 kB"},
    {"height": 3129441, "num_txes": 0},
]

mempool = [
    {"tx_hash": "9f1c...e2", "fee": 0.00003},
    {"tx_hash": "04ab...7d", "fee": 0.00011},
]

home_output = env.render("home.html", network="mainnet", blocks=blocks)
mempool_output = env.render("htmx/mempool_summary.html", mempool=mempool)

# No mempool in the context: the render fails and the fallback is returned
fallback_output = env.render("htmx/mempool_summary.html")


def main() -> None:
    print("=== Home Page ===")
    print(home_output)
    print("=== Mempool Fragment ===")
    print(mempool_output)
    print("=== Fallback ===")
    print(fallback_output)


if __name__ == "__main__":
    main()
