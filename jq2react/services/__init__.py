"""Conversion services"""
