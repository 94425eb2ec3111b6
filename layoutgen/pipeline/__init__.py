"""Layout pipeline — request, relationship model, grid and the two engines.

Each call builds its own grid and state from a validated request and
returns a plain result.  The pieces, leaves first:

  grid       — flat occupancy/owner arenas with fit and first-fit search
  closeness  — letter weights, symmetric matrix, TCR, flow-distance cost
  request    — request dataclasses, parsing and validation
  corelap    — constructive tier-driven placement (one or more rects per department)
  craft      — locked-aware packing plus random-swap improvement search
"""
