"""
Services - resume storage, analysis pipeline and job application CRUD.
"""
