"""API routes package"""
