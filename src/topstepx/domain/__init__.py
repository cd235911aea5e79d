"""Domain layer: models and contract resolution"""
