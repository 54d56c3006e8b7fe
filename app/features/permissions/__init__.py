"""
Permission management feature module.

Implements static role-based access control: each session carries exactly one
role and every gated action is checked against that role's grant set.
"""
