"""Bundled starter vocabulary: canonical skills, their layer and common aliases."""

from models.schemas import TechLayer

# canonical name -> (layer, variations)
SEED_SKILLS: dict[str, tuple[TechLayer, list[str]]] = {
    # Frameworks & languages
    "React": (TechLayer.FRONTEND, ["reactjs", "react.js"]),
    "Vue": (TechLayer.FRONTEND, ["vuejs", "vue.js"]),
    "Angular": (TechLayer.FRONTEND, ["angularjs", "angular.js"]),
    "Svelte": (TechLayer.FRONTEND, ["sveltejs"]),
    "Next.js": (TechLayer.FRONTEND, ["nextjs"]),
    "Nuxt.js": (TechLayer.FRONTEND, ["nuxtjs", "nuxt"]),
    "Redux": (TechLayer.FRONTEND, ["redux-toolkit", "rtk"]),
    "JavaScript": (TechLayer.FRONTEND, ["js", "ecmascript", "es6", "es2015"]),
    "TypeScript": (TechLayer.FRONTEND, ["ts"]),
    "HTML": (TechLayer.FRONTEND, ["html5"]),
    "CSS": (TechLayer.FRONTEND, ["css3"]),
    "Tailwind": (TechLayer.FRONTEND, ["tailwindcss"]),
    "Material-UI": (TechLayer.FRONTEND, ["mui", "material ui"]),
    "Sass": (TechLayer.FRONTEND, ["scss"]),
    "Webpack": (TechLayer.FRONTEND, []),
    "Vite": (TechLayer.FRONTEND, []),
    "Jest": (TechLayer.FRONTEND, []),
    "Cypress": (TechLayer.FRONTEND, []),
    "Playwright": (TechLayer.FRONTEND, []),
    "React Native": (TechLayer.FRONTEND, ["react-native", "rn"]),
    "Flutter": (TechLayer.FRONTEND, []),
    "D3": (TechLayer.FRONTEND, ["d3.js"]),
    # Backend
    "Node.js": (TechLayer.BACKEND, ["nodejs", "node"]),
    "Express": (TechLayer.BACKEND, ["express.js", "expressjs"]),
    "NestJS": (TechLayer.BACKEND, ["nest.js", "nest"]),
    "Python": (TechLayer.BACKEND, ["python3", "py"]),
    "Django": (TechLayer.BACKEND, []),
    "Flask": (TechLayer.BACKEND, []),
    "FastAPI": (TechLayer.BACKEND, ["fast api"]),
    "Celery": (TechLayer.BACKEND, []),
    "Java": (TechLayer.BACKEND, []),
    "Spring Boot": (TechLayer.BACKEND, ["springboot", "spring-boot"]),
    "C#": (TechLayer.BACKEND, ["csharp", "c-sharp", "c sharp"]),
    ".NET": (TechLayer.BACKEND, ["dotnet", ".net-core", "asp.net"]),
    "Go": (TechLayer.BACKEND, ["golang"]),
    "Rust": (TechLayer.BACKEND, []),
    "PHP": (TechLayer.BACKEND, []),
    "Laravel": (TechLayer.BACKEND, []),
    "Ruby": (TechLayer.BACKEND, ["rb"]),
    "Rails": (TechLayer.BACKEND, ["ruby-on-rails", "ror"]),
    "Kotlin": (TechLayer.BACKEND, []),
    "Scala": (TechLayer.BACKEND, []),
    "Elixir": (TechLayer.BACKEND, []),
    "REST": (TechLayer.BACKEND, ["restful", "rest-api", "rest api"]),
    "GraphQL": (TechLayer.BACKEND, ["graph ql"]),
    "gRPC": (TechLayer.BACKEND, []),
    "WebSocket": (TechLayer.BACKEND, ["websockets"]),
    "RabbitMQ": (TechLayer.BACKEND, []),
    "Kafka": (TechLayer.BACKEND, ["apache-kafka"]),
    # Databases
    "PostgreSQL": (TechLayer.DATABASE, ["postgres", "psql", "pg"]),
    "MySQL": (TechLayer.DATABASE, ["my sql"]),
    "MariaDB": (TechLayer.DATABASE, []),
    "SQLite": (TechLayer.DATABASE, []),
    "Oracle": (TechLayer.DATABASE, ["oracle-db"]),
    "SQL Server": (TechLayer.DATABASE, ["mssql", "ms sql", "microsoft-sql-server"]),
    "MongoDB": (TechLayer.DATABASE, ["mongo", "mongo db"]),
    "DynamoDB": (TechLayer.DATABASE, ["dynamo", "aws-dynamodb"]),
    "Cassandra": (TechLayer.DATABASE, ["apache-cassandra"]),
    "Firebase": (TechLayer.DATABASE, ["firestore"]),
    "Redis": (TechLayer.DATABASE, []),
    "Elasticsearch": (TechLayer.DATABASE, ["elastic"]),
    "Neo4j": (TechLayer.DATABASE, []),
    "Snowflake": (TechLayer.DATABASE, []),
    "BigQuery": (TechLayer.DATABASE, ["google-bigquery"]),
    "Redshift": (TechLayer.DATABASE, ["aws-redshift"]),
    # Cloud
    "AWS": (TechLayer.CLOUD, ["amazon-web-services", "amazon web services"]),
    "EC2": (TechLayer.CLOUD, ["aws-ec2"]),
    "S3": (TechLayer.CLOUD, ["aws-s3"]),
    "Lambda": (TechLayer.CLOUD, ["aws-lambda"]),
    "Azure": (TechLayer.CLOUD, ["microsoft azure"]),
    "GCP": (TechLayer.CLOUD, ["google cloud", "google cloud platform"]),
    "Heroku": (TechLayer.CLOUD, []),
    "Vercel": (TechLayer.CLOUD, []),
    "Netlify": (TechLayer.CLOUD, []),
    "Cloudflare": (TechLayer.CLOUD, []),
    # DevOps
    "Docker": (TechLayer.DEVOPS, ["docker compose", "docker-compose"]),
    "Kubernetes": (TechLayer.DEVOPS, ["k8s", "kube"]),
    "Terraform": (TechLayer.DEVOPS, []),
    "Ansible": (TechLayer.DEVOPS, []),
    "Jenkins": (TechLayer.DEVOPS, []),
    "GitHub Actions": (TechLayer.DEVOPS, ["gh actions", "github action"]),
    "GitLab CI": (TechLayer.DEVOPS, ["gitlab-ci"]),
    "CI/CD": (TechLayer.DEVOPS, ["cicd"]),
    "Linux": (TechLayer.DEVOPS, []),
    "Nginx": (TechLayer.DEVOPS, []),
    "Prometheus": (TechLayer.DEVOPS, []),
    "Grafana": (TechLayer.DEVOPS, []),
    # Others
    "Git": (TechLayer.OTHERS, []),
    "Agile": (TechLayer.OTHERS, ["agile methodology", "agile/scrum"]),
    "Scrum": (TechLayer.OTHERS, []),
    "Jira": (TechLayer.OTHERS, []),
    "Machine Learning": (TechLayer.OTHERS, ["ml"]),
    "LLM": (TechLayer.OTHERS, ["large language model", "large language models"]),
}
