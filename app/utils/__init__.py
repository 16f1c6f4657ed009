# Utils package for the Book Project
