class ResultTypeNotSupported(ValueError):
    """
    Exception raised when a search engine result type is not supported.

    Attributes
    ----------
    parameter : str
        The provided result type label that caused the exception.
    allowed_values : list
        The list of allowed result type labels.
    """
    def __init__(self, parameter, allowed_values):
        """
        Initialize the exception with the provided parameter and allowed values.

        Parameters
        ----------
        parameter : str
            The provided result type label that caused the exception.
        allowed_values : list
            The list of allowed result type labels.
        """
        self.parameter = parameter
        self.allowed_values = allowed_values
        super().__init__(f"Invalid parameter value: {parameter}. Allowed values are: {allowed_values}")

class EnzymeNotSupported(ValueError):
    """
    Exception raised when an enzyme name has no cleavage rule.

    Attributes
    ----------
    parameter : str
        The provided enzyme name.
    allowed_values : list
        The list of known enzyme names.
    """
    def __init__(self, parameter, allowed_values):
        self.parameter = parameter
        self.allowed_values = allowed_values
        super().__init__(f"Unknown enzyme: {parameter}. Allowed values are: {allowed_values}")

class FormatUndetermined(ValueError):
    """
    Exception raised when the search engine behind a result file cannot be determined.

    Attributes
    ----------
    path : str
        Path to the result file.
    """
    def __init__(self, path):
        self.path = path
        super().__init__(
            f"Could not determine the search engine result type of '{path}'. "
            "Specify the result type explicitly."
        )

class InvalidResidue(ValueError):
    """
    Exception raised when a peptide holds a residue without a standard mass.

    Attributes
    ----------
    residue : str
        The offending character.
    sequence : str
        The clean sequence it was found in, if known.
    position : int
        1-based position of the residue, if known.
    """
    def __init__(self, residue, sequence=None, position=None):
        self.residue = residue
        self.sequence = sequence
        self.position = position
        location = f" at position {position} of '{sequence}'" if sequence is not None else ""
        super().__init__(f"Invalid residue '{residue}'{location}")

class CatalogLoadError(ValueError):
    """
    Exception raised when a modification definitions or mass correction tags file is malformed.

    Attributes
    ----------
    path : str
        Path to the file being read.
    line_number : int
        1-based line number of the malformed row.
    line : str
        Raw text of the malformed row.
    """
    def __init__(self, path, reason, line_number=None, line=None):
        self.path = path
        self.reason = reason
        self.line_number = line_number
        self.line = line
        location = f" (line {line_number}: '{line}')" if line_number is not None else ""
        super().__init__(f"Error loading {path}{location}: {reason}")

class UnknownModificationName(ValueError):
    """
    Exception raised when a modification name cannot be converted to a mass.
    """
    def __init__(self, name):
        self.name = name
        super().__init__(f"No mass known for modification '{name}'")

class UnknownModificationSymbol(ValueError):
    """
    Exception raised when a peptide carries a modification symbol that no catalog entry owns.
    """
    def __init__(self, symbol, peptide=None):
        self.symbol = symbol
        self.peptide = peptide
        location = f" in '{peptide}'" if peptide is not None else ""
        super().__init__(f"Unknown modification symbol '{symbol}'{location}")
