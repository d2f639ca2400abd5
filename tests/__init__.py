"""
Tests Module
============

Unit tests for the Cryptofolio risk engine.

Test Categories:
- unit/test_correlation.py: correlation models and volatility
- unit/test_optimizer.py: weight optimizer and Black-Litterman views
- unit/test_construction.py: portfolio statistics
- unit/test_rebalancer.py: rebalance recommendations
- unit/test_risk_metrics.py: account risk metrics
- unit/test_alerts.py: risk alerts
- unit/test_sizing.py: position sizing and stops
- unit/test_monte_carlo.py: Monte Carlo simulation
- unit/test_scheduler.py: recurring simulations
- unit/test_validation.py: boundary validation and configuration

Author: Cryptofolio
License: MIT
"""
