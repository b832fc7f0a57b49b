"""English messages for the reference rule catalog."""

BUILTIN_MESSAGES = {
    "en": {
        "required": "The {field} is required.",
        "alpha": "The {field} may only contain alphabetic characters.",
        "alpha_num": "The {field} may only contain alpha-numeric characters.",
        "alpha_dash": (
            "The {field} may contain alpha-numeric characters "
            "as well as dashes and underscores."
        ),
        "numeric": "The {field} must be numeric.",
        "digits": "The {field} must be numeric and exactly contain {0} digits.",
        "min": "The {field} must be at least {0} characters.",
        "max": "The {field} may not be greater than {0} characters.",
        "between": "The {field} must be between {0} and {1}.",
        "regex": "The {field} format is invalid.",
        "in": "The {field} must be a valid value.",
        "not_in": "The {field} must be a valid value.",
        "email": "The {field} must be a valid email.",
        "url": "The {field} is not a valid URL.",
        "ip": "The {field} must be a valid ip address.",
        "size": "The {field} must be less than {0} KB.",
        "ext": "The {field} must be a valid file.",
        "mimes": "The {field} must be a valid file type.",
        "image": "The {field} must be an image.",
    },
}
