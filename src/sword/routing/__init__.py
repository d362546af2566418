"""Routing: pattern compiler, route values, and the cursor-based router.

Routes are registered during setup and tried in declaration order.
"""
