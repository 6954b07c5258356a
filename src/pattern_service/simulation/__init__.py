"""
Monte Carlo simulation of response patterns.

Draws latent traits for a simulated population and generates independent
response patterns from a fitted model, for adaptive-testing studies.
"""
