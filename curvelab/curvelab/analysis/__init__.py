"""Numerical routines: solvers, models, sampling, splines, stroke fitting."""
