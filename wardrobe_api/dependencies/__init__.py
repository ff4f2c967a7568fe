"""Request dependencies"""
