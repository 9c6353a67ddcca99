"""
MedCare - account lifecycle, role profiles and appointment relationships.
"""
