class TerminologyInfrastructureError(Exception):
    pass


class DataSourceError(TerminologyInfrastructureError):
    pass


class DataSourceNotFoundError(DataSourceError):
    pass


class DataParseError(DataSourceError):
    pass
