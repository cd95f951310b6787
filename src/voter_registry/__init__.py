"""Voter registry API and reconciliation tooling."""
