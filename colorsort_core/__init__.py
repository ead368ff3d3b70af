"""
Color-sort puzzle core Python package.

Pure-logic helpers for the tube-pouring puzzle, kept free of any rendering so
they can be shared by the CLI, the Flask API and the tests.
Modules:
- tube.py: Segment, Tube, palette
- state.py: Move, LevelConfig, GameState and result records
- moves.py: move validation and execution
- win.py: win condition and progress stats
- undo.py: move history and reversal
- deal.py: level generation
- hashkey.py / solver.py: BFS optimal-move solver
- rating.py: star rating
- db.py / scores.py: sqlite persistence of best scores and solver results
- session.py: one play session (selection, moves, undo, restart)
"""
