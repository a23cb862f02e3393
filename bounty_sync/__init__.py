"""Bounty issue synchronization and event publication service"""
