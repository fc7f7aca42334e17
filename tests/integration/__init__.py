ARGUMENT_ERROR = 2
