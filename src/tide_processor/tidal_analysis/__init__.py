"""
Tidal Analysis Subpackage

Provides functionality for:
- Astronomical arguments (t_tide polynomials and J2000 mean longitudes)
- Nodal corrections (Admiralty closed form and Doodson-number form)
- The 146-constituent table and the principal constituent definitions
- Constituent selection by the Rayleigh criterion
- Harmonic analysis (Simplified, Admiralty, T_TIDE and a UTide reference)
- Cancelable background execution of analyses
"""

from tide_processor.tidal_analysis.astronomy import (
    astronomical_arguments,
    j2000_mean_longitudes,
    julian_date,
)
from tide_processor.tidal_analysis.constituent_database import (
    CONSTITUENT_DATABASE,
    TidalConstituent,
    get_constituent,
)
from tide_processor.tidal_analysis.constituents import (
    NOS_37_CONSTITUENTS,
    PRINCIPAL_CONSTITUENTS,
)
from tide_processor.tidal_analysis.harmonic_analysis import (
    METHOD_LABELS,
    AnalysisCancelled,
    HarmonicAnalysisResult,
    harmonic_analysis,
)
from tide_processor.tidal_analysis.nodal_corrections import (
    NodalCorrection,
    admiralty_nodal_corrections,
    doodson_nodal_correction,
)
from tide_processor.tidal_analysis.selection import (
    ConstituentSelection,
    select_constituents,
)
from tide_processor.tidal_analysis.tasks import AnalysisHandle, AnalysisRunner

__all__ = [
    # Astronomy
    'julian_date',
    'astronomical_arguments',
    'j2000_mean_longitudes',
    # Nodal corrections
    'NodalCorrection',
    'admiralty_nodal_corrections',
    'doodson_nodal_correction',
    # Constituent definitions
    'CONSTITUENT_DATABASE',
    'TidalConstituent',
    'get_constituent',
    'PRINCIPAL_CONSTITUENTS',
    'NOS_37_CONSTITUENTS',
    # Selection
    'ConstituentSelection',
    'select_constituents',
    # Harmonic analysis
    'METHOD_LABELS',
    'AnalysisCancelled',
    'HarmonicAnalysisResult',
    'harmonic_analysis',
    # Background execution
    'AnalysisRunner',
    'AnalysisHandle',
]
