"""Onboarding review workflow: states, transitions and the decision engine."""
