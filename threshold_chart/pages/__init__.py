"""Threshold Chart pages"""
