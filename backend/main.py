# backend/main.py
# Point d'entrée uvicorn : `python main.py` ou `uvicorn main:app --reload`

import uvicorn

from puzzle_tracker.main import app

if __name__ == "__main__":
    uvicorn.run("puzzle_tracker.main:app", host="0.0.0.0", port=8000, reload=True)
