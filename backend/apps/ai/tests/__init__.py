"""
Tests for the AI app.

This package contains tests for:
- Heuristic position evaluation and its cache
- Rollout players and the rollout engine
- Candidate ranking
- The analysis service, API endpoint and management command
"""
