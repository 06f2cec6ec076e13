"""Scholarship beneficiary portal backend"""
