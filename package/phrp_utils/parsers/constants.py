### FILE DETECTION

# Ordered: specific suffixes before the generic synopsis/first-hits suffixes
FILENAME_SUFFIXES = [
    ("_xt.txt", "xtandem"),
    ("_inspect_syn.txt", "inspect"),
    ("_inspect_fht.txt", "inspect"),
    ("_inspect.txt", "inspect"),
    ("_msgfplus_syn.txt", "msgfplus"),
    ("_msgfplus_fht.txt", "msgfplus"),
    ("_msgfdb_syn.txt", "msgfplus"),
    ("_msgfdb_fht.txt", "msgfplus"),
    ("_msgfdb.txt", "msgfplus"),
    ("_msgfdb.tsv", "msgfplus"),
    ("_msgfplus.tsv", "msgfplus"),
    ("_msgfplus.mzid.tsv", "msgfplus"),
    ("_msalign_syn.txt", "msalign"),
    ("_msalign_fht.txt", "msalign"),
    ("_msalign.txt", "msalign"),
    ("_moda_syn.txt", "moda"),
    ("_moda_fht.txt", "moda"),
    ("_moda.txt", "moda"),
    ("_modp_syn.txt", "modplus"),
    ("_modp_fht.txt", "modplus"),
    ("_modplus.txt", "modplus"),
    ("_mspath_syn.txt", "mspathfinder"),
    ("_mspath_fht.txt", "mspathfinder"),
    ("_mspathfinder.tsv", "mspathfinder"),
    ("_ictsv.tsv", "mspathfinder"),
    ("_toppic_syn.txt", "toppic"),
    ("_toppic_fht.txt", "toppic"),
    ("_toppic_prsms.txt", "toppic"),
    ("_maxq_syn.txt", "maxquant"),
    ("_maxq_fht.txt", "maxquant"),
    ("msms.txt", "maxquant"),
]

# Suffixes shared by several engines; the header decides
GENERIC_SUFFIXES = ["_syn.txt", "_fht.txt"]

XTANDEM_XML_ROOT = "<bioml"

# Header tokens that identify an engine: (tokens that must all be present,
# tokens of which at least one must be present, engine label)
HEADER_RULES = [
    ({"MQScore", "TotalPRMScore"}, set(), "inspect"),
    ({"DelM_MaxQuant", "Score"}, set(), "maxquant"),
    ({"Modified sequence", "PEP", "Score"}, set(), "maxquant"),
    ({"MSGFScore"}, {"MSGFDB_SpecProb", "MSGFDB_SpecEValue", "SpecEValue", "DeNovoScore"}, "msgfplus"),
    ({"XCorr", "DelCn"}, set(), "sequest"),
    ({"Peptide_Hyperscore"}, set(), "xtandem"),
    ({"ModificationAnnotation"}, set(), "modplus"),
    ({"MostAbundantIsotopeMz"}, set(), "mspathfinder"),
    (set(), {"Proteoform_ID", "Proteoform ID"}, "toppic"),
    (set(), {"Prsm_ID", "Prsm ID"}, "msalign"),
    ({"Probability"}, {"Peptide_Position", "PeptidePosition"}, "moda"),
]

# An ambiguous .tsv with a readable but unrecognised header is read as MS-GF+ output
DEFAULT_TSV_FALLBACK = "msgfplus"


### COLUMN MAPPINGS
# Native column name -> unified field name. Columns listed under *_SCORE_COLUMNS
# are carried over verbatim into the PSM score map.

SEQUEST_COLUMN_MAPPING = {
    "HitNum": "result_id",
    "ScanNum": "scan",
    "ChargeState": "charge",
    "MH": "peptide_mh",
    "DelM": "delm_da",
    "DelM_PPM": "delm_ppm",
    "Reference": "protein",
    "Peptide": "peptide",
    "RankXc": "rank",
}
SEQUEST_SCORE_COLUMNS = [
    "ScanCount", "XCorr", "DelCn", "Sp", "MultiProtein", "DelCn2", "RankSp", "RankXc",
    "XcRatio", "PassFilt", "MScore", "NumTrypticEnds", "Ions_Observed", "Ions_Expected",
]

XTANDEM_COLUMN_MAPPING = {
    "Result_ID": "result_id",
    "Scan": "scan",
    "Charge": "charge",
    "Peptide_MH": "peptide_mh",
    "Delta_Mass": "delm_da",
    "DelM_PPM": "delm_ppm",
    "Peptide_Sequence": "peptide",
    "Protein_Name": "protein",
}
XTANDEM_SCORE_COLUMNS = [
    "Group_ID", "Peptide_Hyperscore", "Peptide_Expectation_Value_Log(e)",
    "Multiple_Protein_Count", "DeltaCn2", "y_score", "y_ions", "b_score", "b_ions",
    "Peptide_Intensity_Log(I)",
]

INSPECT_COLUMN_MAPPING = {
    "ResultID": "result_id",
    "Scan": "scan",
    "Scan#": "scan",
    "Peptide": "peptide",
    "Annotation": "peptide",
    "Protein": "protein",
    "Charge": "charge",
    "MH": "peptide_mh",
    "PrecursorMZ": "precursor_mz",
    "PrecursorError": "delm_da",
    "PrecursorMZError": "delm_mz",
    "DelM_PPM": "delm_ppm",
    "RankTotalPRMScore": "rank",
}
INSPECT_SCORE_COLUMNS = [
    "MQScore", "Length", "TotalPRMScore", "MedianPRMScore", "FractionY", "FractionB",
    "Intensity", "NTT", "PValue", "InspectPValue", "FScore", "F-Score", "DeltaScore",
    "DeltaScoreOther", "DeltaNormMQScore", "DeltaNormTotalPRMScore", "RankTotalPRMScore",
    "RankFScore", "RecordNumber", "DBFilePos", "SpecFilePos",
]

MSGFPLUS_COLUMN_MAPPING = {
    "ResultID": "result_id",
    "Scan": "scan",
    "ScanNum": "scan",
    "FragMethod": "collision_mode",
    "Charge": "charge",
    "PrecursorMZ": "precursor_mz",
    "Precursor": "precursor_mz",
    "DelM": "delm_da",
    "PrecursorError(Da)": "delm_da",
    "DelM_PPM": "delm_ppm",
    "PrecursorError(ppm)": "delm_ppm",
    "MH": "peptide_mh",
    "Peptide": "peptide",
    "Protein": "protein",
    "Rank_MSGFDB_SpecEValue": "rank",
    "Rank_MSGFDB_SpecProb": "rank",
}
MSGFPLUS_SCORE_COLUMNS = [
    "SpecIndex", "SpecID", "NTT", "DeNovoScore", "MSGFScore", "MSGFDB_SpecEValue",
    "MSGFDB_SpecProb", "SpecEValue", "Rank_MSGFDB_SpecEValue", "EValue", "PValue",
    "QValue", "PepQValue", "FDR", "PepFDR", "EFDR", "IsotopeError",
]

MSALIGN_COLUMN_MAPPING = {
    "ResultID": "result_id",
    "Scan": "scan",
    "Scan(s)": "scan",
    "Charge": "charge",
    "PrecursorMZ": "precursor_mz",
    "Precursor_mass": "precursor_mass",
    "DelM": "delm_da",
    "DelM_PPM": "delm_ppm",
    "MH": "peptide_mh",
    "Peptide": "peptide",
    "Protein": "protein",
    "Protein_name": "protein",
    "FragMethod": "collision_mode",
    "Rank_PValue": "rank",
}
MSALIGN_SCORE_COLUMNS = [
    "Prsm_ID", "Spectrum_ID", "Protein_Mass", "Unexpected_Mod_Count", "Peak_Count",
    "Matched_Peak_Count", "Matched_Fragment_Ion_Count", "PValue", "P-value",
    "Rank_PValue", "EValue", "E-value", "FDR", "Species_ID",
]

MODA_COLUMN_MAPPING = {
    "ResultID": "result_id",
    "Scan": "scan",
    "ScanNo": "scan",
    "Charge": "charge",
    "PrecursorMZ": "precursor_mz",
    "ObservedMW": "precursor_mass",
    "DelM": "delm_da",
    "DeltaMass": "delm_da",
    "DelM_PPM": "delm_ppm",
    "MH": "peptide_mh",
    "CalculatedMW": "peptide_mass",
    "Peptide": "peptide",
    "Protein": "protein",
    "Rank_Probability": "rank",
}
MODA_SCORE_COLUMNS = [
    "Spectrum_Index", "Index", "Score", "Probability", "Rank_Probability",
    "Peptide_Position", "PeptidePosition", "QValue",
]

MODPLUS_COLUMN_MAPPING = {
    "ResultID": "result_id",
    "Scan": "scan",
    "ScanNo": "scan",
    "Charge": "charge",
    "PrecursorMZ": "precursor_mz",
    "ObservedMW": "precursor_mass",
    "DelM": "delm_da",
    "DeltaMass": "delm_da",
    "DelM_PPM": "delm_ppm",
    "MH": "peptide_mh",
    "CalculatedMW": "peptide_mass",
    "Peptide": "peptide",
    "Protein": "protein",
    "Rank_Score": "rank",
}
MODPLUS_SCORE_COLUMNS = [
    "Spectrum_Index", "Index", "NTT", "ModificationAnnotation", "Peptide_Position",
    "Score", "Probability", "Rank_Score", "QValue",
]

MSPATHFINDER_COLUMN_MAPPING = {
    "ResultID": "result_id",
    "Scan": "scan",
    "Charge": "charge",
    "MostAbundantIsotopeMz": "precursor_mz",
    "Mass": "precursor_mass",
    "Sequence": "peptide",
    "Modifications": "modifications",
    "ProteinName": "protein",
    "ProteinDesc": "protein_description",
    "ResidueStart": "residue_start",
    "Start": "residue_start",
    "ResidueEnd": "residue_end",
    "End": "residue_end",
    "Pre": "prefix",
    "Post": "suffix",
}
MSPATHFINDER_SCORE_COLUMNS = [
    "Composition", "ProteinLength", "MatchedFragments", "#MatchedFragments",
    "Probability", "SpecEValue", "EValue", "QValue", "PepQValue",
]

TOPPIC_COLUMN_MAPPING = {
    "ResultID": "result_id",
    "Scan": "scan",
    "Scan(s)": "scan",
    "FragMethod": "collision_mode",
    "Fragmentation": "collision_mode",
    "Charge": "charge",
    "PrecursorMZ": "precursor_mz",
    "Precursor mass": "precursor_mass",
    "DelM": "delm_da",
    "DelM_PPM": "delm_ppm",
    "MH": "peptide_mh",
    "Peptide": "peptide",
    "Proteoform": "peptide",
    "Protein": "protein",
    "Protein accession": "protein",
    "ResidueStart": "residue_start",
    "First residue": "residue_start",
    "ResidueEnd": "residue_end",
    "Last residue": "residue_end",
    "Rank_PValue": "rank",
}
TOPPIC_SCORE_COLUMNS = [
    "Prsm_ID", "Prsm ID", "Spectrum_ID", "Spectrum ID", "Proteoform_ID", "Proteoform ID",
    "Feature_Intensity", "Feature intensity", "Feature_Score", "Feature score",
    "Unexpected_Mod_Count", "#unexpected modifications", "Peak_Count", "#peaks",
    "Matched_Peak_Count", "#matched peaks", "Matched_Fragment_Ion_Count",
    "#matched fragment ions", "PValue", "P-value", "Rank_PValue", "EValue", "E-value",
    "QValue", "Q-value (spectral FDR)", "Proteoform_QValue", "Proteoform FDR",
    "Variable_PTMs",
]

MAXQUANT_COLUMN_MAPPING = {
    "ResultID": "result_id",
    "id": "result_id",
    "Scan": "scan",
    "Scan number": "scan",
    "FragMethod": "collision_mode",
    "Fragmentation": "collision_mode",
    "Charge": "charge",
    "PrecursorMZ": "precursor_mz",
    "m/z": "precursor_mz",
    "DelM": "delm_da",
    "Mass error [Da]": "delm_da",
    "DelM_PPM": "delm_ppm",
    "Mass error [ppm]": "delm_ppm",
    "MH": "peptide_mh",
    "Mass": "peptide_mass",
    "Peptide": "peptide",
    "Modified sequence": "peptide",
    "Proteins": "protein",
    "LeadingRazorProtein": "leading_protein",
}
MAXQUANT_SCORE_COLUMNS = [
    "Dataset", "DatasetID", "Raw file", "SpecIndex", "NTT", "PEP", "Score", "DeltaScore",
    "Delta score", "Intensity", "MassAnalyzer", "Mass analyzer", "PrecursorType", "Type",
    "RetentionTime", "Retention time", "PrecursorScan", "PrecursorIntensity",
    "NumberOfMatches", "Number of matches", "IntensityCoverage", "Intensity coverage",
    "MissedCleavages", "Missed cleavages", "MsMsID", "ProteinGroupIDs",
    "Protein group IDs", "PeptideID", "Peptide ID", "ModPeptideID", "Mod. peptide ID",
    "EvidenceID", "Evidence ID",
]

# MaxQuant's two-letter modification abbreviations
MAXQUANT_MODIFICATION_ABBREVIATIONS = {
    "ac": "Acetyl",
    "ox": "Oxidation",
    "ph": "Phospho",
    "de": "Deamidation",
    "cam": "Carbamidomethyl",
    "gl": "Gln->pyro-Glu",
}
