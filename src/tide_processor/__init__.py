"""
Tide Processor

Load tide gauge records, clean them and estimate their harmonic
constituents.

Subpackages:
- series: parsing, interval validation, gap filling, downsampling, export
  and the immutable processing session
- tidal_analysis: astronomical arguments, nodal corrections, the
  constituent table, Rayleigh selection and the harmonic estimators
"""

__version__ = '0.1.0'
