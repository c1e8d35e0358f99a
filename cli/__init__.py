"""Kharcha command line interface"""
