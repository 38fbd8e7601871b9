"""Maven project inspection: POM parsing and resolution, the graph plugin and dependency trees."""