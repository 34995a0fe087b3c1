import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from wordgrid.settings import settings

logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
logger = logging.getLogger("wordgrid")


def _apply_log_level():
    logger.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)


# Populated at startup
_trie = None


def create_app() -> FastAPI:
    from contextlib import asynccontextmanager

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        global _trie

        _apply_log_level()
        from wordgrid.trie import Trie, load_trie
        logger.info("Loading dictionary from %s", settings.DICTIONARY_PATH)
        try:
            _trie = load_trie(str(settings.DICTIONARY_PATH))
        except OSError as e:
            logger.warning("Could not load dictionary (%s), serving with an empty trie", e)
            _trie = Trie()

        yield

    application = FastAPI(title="Word Grid Solver", lifespan=lifespan)

    @application.get("/health")
    async def health():
        return {
            "status": "ok",
            "trie_loaded": _trie is not None,
            "word_count": len(_trie) if _trie is not None else 0,
        }

    @application.post("/solve")
    async def solve(request: Request):
        from wordgrid.metrics import StageTimer
        from wordgrid.solver import SearchEngine, unique_words

        if _trie is None:
            raise HTTPException(503, "Dictionary not loaded")

        try:
            body = await request.json()
        except ValueError:
            raise HTTPException(400, "Request body must be JSON")
        if not isinstance(body, dict):
            raise HTTPException(400, "Request body must be a JSON object")

        timer = StageTimer()

        with timer.stage("grid"):
            grid = _grid_from_body(body)

        logger.info("Board %dx%d: %s", grid.width, grid.height, " / ".join("".join(row) for row in grid.rows))

        engine = SearchEngine(_trie)
        with timer.stage("solve"):
            results = engine.find_words(grid, workers=settings.WORKERS)

        words = unique_words(results)
        if settings.MAX_RESULTS > 0:
            words = words[:settings.MAX_RESULTS]
        logger.info("Found %d paths, %d distinct words (%d walks)", len(results), len(words), engine.walks)

        return JSONResponse({
            "width": grid.width,
            "height": grid.height,
            "board": grid.to_lists(),
            "results": [{"word": r.word, "path": [list(p) for p in r.path]} for r in results],
            "result_count": len(results),
            "words": words,
            "walks": engine.walks,
            "processing_time": timer.total_ms,
            "stage_timings": timer.summary(),
        })

    @application.get("/api/settings")
    async def api_get_settings():
        from wordgrid.settings import get_editable_settings, EDITABLE_FIELDS
        values = get_editable_settings(settings)
        field_types = {k: v.__name__ for k, v in EDITABLE_FIELDS.items()}
        return JSONResponse({"settings": values, "field_types": field_types})

    @application.post("/api/settings")
    async def api_post_settings(request: Request):
        from wordgrid.settings import update_settings, get_editable_settings
        try:
            body = await request.json()
        except ValueError:
            raise HTTPException(400, "Request body must be JSON")
        if not isinstance(body, dict):
            raise HTTPException(400, "Request body must be a JSON object")
        errors = update_settings(settings, **body)
        if "DEBUG" in body and "DEBUG" not in errors:
            _apply_log_level()
        if errors:
            return JSONResponse({"updated": get_editable_settings(settings), "errors": errors}, status_code=400)
        logger.info("Settings updated: %s", body)
        return JSONResponse({"updated": get_editable_settings(settings)})

    return application


def _grid_from_body(body: dict):
    """Explicit ``board`` rows, or a random ``size`` x ``size`` grid from ``seed``."""
    from wordgrid.grid import Grid, make_rng

    board = body.get("board")
    if board is not None:
        if isinstance(board, str):
            board = board.split("/")
        if not isinstance(board, list) or not all(isinstance(row, (list, str)) for row in board):
            raise HTTPException(400, "board must be a list of rows")
        try:
            grid = Grid([list(row) for row in board])
        except ValueError as e:
            raise HTTPException(400, f"Invalid board: {e}")
        if max(grid.width, grid.height) > settings.MAX_GRID_SIZE:
            raise HTTPException(400, f"board is larger than {settings.MAX_GRID_SIZE}x{settings.MAX_GRID_SIZE}")
        return grid

    size = body.get("size", settings.GRID_SIZE)
    seed = body.get("seed", settings.RANDOM_SEED)
    if not isinstance(size, int) or isinstance(size, bool) or size < 1:
        raise HTTPException(400, f"size must be a positive integer, got {size!r}")
    if size > settings.MAX_GRID_SIZE:
        raise HTTPException(400, f"size must be <= {settings.MAX_GRID_SIZE}, got {size}")
    if not isinstance(seed, int) or isinstance(seed, bool):
        raise HTTPException(400, f"seed must be an integer, got {seed!r}")
    return Grid.random(size, size, settings.ALPHABET, make_rng(seed))


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
