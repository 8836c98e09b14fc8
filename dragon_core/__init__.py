"""
Dragon solitaire core package.

Pure game logic and the solver, shared by the CLI (game.py) and the Flask API (app.py).
Modules:
- cards.py, cells.py, board.py: cards, the four kinds of cell, the immutable Board
- automove.py, moves.py: forced moves and successor enumeration
- normalize.py, hashkey.py: canonical board identity and stable keys
- heuristic.py, solver.py: best-first search for a winning line
- deal.py, render.py, session.py, cli.py: seeded deals, text output, interactive play
- config.py: environment settings and logging setup
"""
