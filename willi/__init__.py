"""
Watch Out Willi
===============

Single-screen falling-rock puzzle. Willi digs through dirt, eats food and must
not end up beneath a falling rock. The level is won once every piece of food
has been eaten.

The simulation core lives in ``willi.core``. All tunable parameters are in
game_config.yaml; bundled levels are under maps/.
"""
