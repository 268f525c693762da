"""
Capital gains lot selector (capgains)

Computes which purchase lots of a portfolio to sell to raise a target
amount of cash while realizing as little capital gain as possible. Lots are
ranked by capital gain per dollar of proceeds and sold in that order, with
the last lot cut down to the whole shares actually needed.

This is a planning tool. It does not model wash sales or holding periods.
"""

__version__ = "0.1.0"
__author__ = "capgains developers"
