"""Python project inspection: imports, requirements files, build requirements and pip."""