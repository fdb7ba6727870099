"""Route Map Survey dev launcher.

Runs the survey API under uvicorn. Extra modes work on the draft store
directly: --demo seeds a demo respondent, --list-drafts prints a summary of
the saved drafts and --export writes one respondent's document to a file
named like the browser download.
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

ROOT = Path(__file__).parent
load_dotenv(ROOT / ".env")

HOST = os.getenv("HOST", "0.0.0.0")
BACKEND_PORT = int(os.getenv("BACKEND_PORT", "13013"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "info")


def _print_drafts() -> None:
    from backend import storage

    drafts = storage.list_drafts()
    if not drafts:
        print("No drafts saved.")
        return
    for document in drafts:
        values = document.get("values") or {}
        answered = sum(1 for v in values.values() if str(v).strip())
        name = values.get("name") or "anonymous"
        print(f"{document.get('respondentId')}  {name!r}  {answered} answered  {document.get('timestamp', '')}")


def _export_draft(respondent_id: str) -> int:
    from backend import sessions

    form = sessions.get_form(respondent_id)
    if form is None:
        print(f"No draft for respondent {respondent_id!r}.", file=sys.stderr)
        return 1
    path = Path(form.download_filename())
    path.write_text(json.dumps(form.to_document(), indent=2, ensure_ascii=False), encoding="utf-8")
    print(f"Wrote {path}")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Route Map Survey dev launcher")
    parser.add_argument("--data-dir", type=Path, default=None,
                        help="Data storage directory (default: ./data)")
    parser.add_argument("--demo", action="store_true",
                        help="Clean drafts and create a demo survey draft")
    parser.add_argument("--list-drafts", action="store_true",
                        help="Print the saved drafts and exit")
    parser.add_argument("--export", metavar="RESPONDENT_ID",
                        help="Write a respondent's survey document to ./learning_route_map_<name>.json and exit")
    parser.add_argument("--no-reload", action="store_true",
                        help="Run the server without watching for code changes")
    args = parser.parse_args()

    logging.basicConfig(level=LOG_LEVEL.upper(), format="%(levelname)s %(name)s: %(message)s")

    data_dir = args.data_dir or Path(os.getenv("DATA_DIR", str(ROOT / "data")))
    # The server process re-reads DATA_DIR when it imports backend.app
    os.environ["DATA_DIR"] = str(data_dir.resolve())

    from backend import storage
    storage.init_storage(data_dir)

    if args.demo:
        from backend.demo import create_demo_data
        create_demo_data()
    if args.list_drafts:
        _print_drafts()
        return
    if args.export:
        sys.exit(_export_draft(args.export))

    print(f"Starting backend on http://localhost:{BACKEND_PORT} ...")
    uvicorn.run(
        "backend.app:app",
        host=HOST,
        port=BACKEND_PORT,
        reload=not args.no_reload,
        reload_dirs=None if args.no_reload else [str(ROOT / "backend"), str(ROOT / "story_grid")],
        log_level=LOG_LEVEL,
    )


if __name__ == "__main__":
    main()
